from delve.dungeon.cells import Grid
from delve.dungeon.tiles import CORRIDOR, DOOR, FLOOR, WALL
from delve.dungeon.walls import VertexKind, analyze_walls, classify_vertex, extract_wall_segments, is_corner


def test_single_walkable_cell():
    g = Grid(3, 3)
    g.set(1, 1, FLOOR)
    topo = analyze_walls(g)
    assert sorted(topo.convex) == [(1, 1), (1, 2), (2, 1), (2, 2)]
    assert topo.concave == [] and topo.saddle == []
    assert topo.horizontal == [(1, 1), (1, 2)]
    assert topo.vertical == [(1, 1), (2, 1)]
    assert topo.segment_count == 4


def test_block_has_only_outer_corners():
    g = Grid(4, 4)
    for x in (1, 2):
        for y in (1, 2):
            g.set(x, y, CORRIDOR)
    topo = analyze_walls(g)
    assert sorted(topo.convex) == [(1, 1), (1, 3), (3, 1), (3, 3)]
    assert topo.concave == [] and topo.saddle == []
    assert topo.segment_count == 8
    assert classify_vertex(g, 2, 2) is VertexKind.NONE
    assert classify_vertex(g, 2, 1) is VertexKind.NONE


def test_l_block_has_one_concave_corner():
    g = Grid(4, 4)
    for pos in [(0, 0), (1, 0), (0, 1)]:
        g.set(*pos, FLOOR)
    assert classify_vertex(g, 1, 1) is VertexKind.CONCAVE
    topo = analyze_walls(g)
    assert topo.concave == [(1, 1)]


def test_diagonal_cells_make_a_saddle():
    g = Grid(2, 2)
    g.set(0, 0, FLOOR)
    g.set(1, 1, DOOR)
    assert classify_vertex(g, 1, 1) is VertexKind.SADDLE
    g2 = Grid(2, 2)
    g2.set(1, 0, FLOOR)
    g2.set(0, 1, FLOOR)
    assert classify_vertex(g2, 1, 1) is VertexKind.SADDLE


def test_walls_are_not_walkable():
    g = Grid(3, 3)
    g.set(1, 1, WALL)
    topo = analyze_walls(g)
    assert topo.corners == [] and topo.segment_count == 0


def test_grid_border_counts_as_solid():
    g = Grid(2, 1)
    g.set(0, 0, FLOOR)
    g.set(1, 0, FLOOR)
    horizontal, vertical = extract_wall_segments(g)
    assert horizontal == [(0, 0), (0, 1), (1, 0), (1, 1)]
    assert vertical == [(0, 0), (2, 0)]
    assert sorted(analyze_walls(g).convex) == [(0, 0), (0, 1), (2, 0), (2, 1)]


def test_is_corner():
    assert is_corner(VertexKind.CONVEX) and is_corner(VertexKind.SADDLE)
    assert not is_corner(VertexKind.NONE)
