import random

import pytest

from delve.dungeon import ShapeConfig
from delve.dungeon.cells import Grid, Rect
from delve.dungeon.shapes import (
    SHAPE_ORDER,
    RoomShape,
    apply_shape,
    apply_shapes,
    can_apply,
    remove_cells,
    select_shape,
)
from delve.dungeon.tiles import EMPTY, FLOOR

from dungeon_test_utils import floor_owned, make_room


def _bbox(cells):
    xs = [x for x, _y in cells]
    ys = [y for _x, y in cells]
    return Rect(min(xs), min(ys), max(xs) + 1, max(ys) + 1)


@pytest.mark.parametrize("seed", range(20))
def test_l_shape_cuts_one_corner_block(seed):
    g = Grid(12, 12)
    room = make_room(g, Rect(1, 1, 9, 9))
    removed = apply_shape(room, g, RoomShape.L_SHAPE, ShapeConfig(), random.Random(seed))
    assert room.shape is RoomShape.L_SHAPE
    box = _bbox(removed)
    # the removed cells form a solid rectangle sitting in one room corner
    assert len(removed) == box.area
    assert 2 <= box.width <= 4 and 2 <= box.height <= 4
    assert box.x0 == 1 or box.x1 == 9
    assert box.y0 == 1 or box.y1 == 9
    assert len(floor_owned(g, room)) == 64 - len(removed)
    for x, y in removed:
        assert g.type_at(x, y) == EMPTY


def test_tiny_room_stays_rectangle_without_drawing():
    g = Grid(8, 8)
    room = make_room(g, Rect(2, 2, 5, 5))
    rng = random.Random(3)
    before = rng.getstate()
    assert apply_shapes([room], g, ShapeConfig(), rng) == {}
    assert rng.getstate() == before
    assert room.shape is RoomShape.RECTANGLE
    assert len(floor_owned(g, room)) == 9


@pytest.mark.parametrize(
    "shape,w,h,expected",
    [
        (RoomShape.RECTANGLE, 1, 1, True),
        (RoomShape.L_SHAPE, 6, 6, True),
        (RoomShape.L_SHAPE, 5, 9, False),
        (RoomShape.T_SHAPE, 9, 5, False),
        (RoomShape.RECESSES, 6, 20, True),
        (RoomShape.U_SHAPE, 7, 10, False),
        (RoomShape.U_SHAPE, 8, 8, True),
        (RoomShape.CROSS, 12, 7, False),
        (RoomShape.CIRCULAR, 8, 12, True),
        (RoomShape.CIRCULAR, 8, 13, False),
        (RoomShape.CIRCULAR, 7, 7, False),
    ],
)
def test_compatibility_table(shape, w, h, expected):
    assert can_apply(shape, w, h, ShapeConfig()) is expected


def test_incompatible_shape_is_refused():
    g = Grid(10, 10)
    room = make_room(g, Rect(2, 2, 7, 7))
    assert apply_shape(room, g, RoomShape.CROSS, ShapeConfig(), random.Random(0)) == set()
    assert room.shape is RoomShape.RECTANGLE
    assert len(floor_owned(g, room)) == 25


def test_selected_shape_is_always_compatible():
    cfg = ShapeConfig()
    rng = random.Random(99)
    for w in range(3, 16):
        for h in range(3, 16):
            for _ in range(5):
                assert can_apply(select_shape(w, h, cfg, rng), w, h, cfg)


def test_zero_weight_shapes_never_selected():
    cfg = ShapeConfig(rectangle_chance=0, l_shape_chance=1, t_shape_chance=0, u_shape_chance=0,
                      cross_shape_chance=0, circular_chance=0, with_recesses_chance=0)
    rng = random.Random(4)
    assert {select_shape(12, 12, cfg, rng) for _ in range(50)} == {RoomShape.L_SHAPE}


@pytest.mark.parametrize("shape", [s for s in SHAPE_ORDER if s is not RoomShape.RECTANGLE])
def test_every_shape_carves_inside_its_room(shape):
    g = Grid(20, 20)
    rect = Rect(4, 4, 16, 16)
    room = make_room(g, rect)
    removed = apply_shape(room, g, shape, ShapeConfig(), random.Random(21))
    assert removed
    assert all(rect.contains(x, y) for x, y in removed)
    assert floor_owned(g, room) == set(rect.cells()) - removed
    assert room.shape is shape


def test_remove_cells_only_touches_own_floor():
    g = Grid(20, 10)
    a = make_room(g, Rect(2, 2, 8, 8), index=0, walls=False)
    b = make_room(g, Rect(8, 2, 14, 8), index=1, walls=False)
    removed = remove_cells(g, a, 5, 2, 11, 8)
    assert removed == set(Rect(5, 2, 8, 8).cells())
    for x, y in Rect(8, 2, 11, 8).cells():
        assert g.type_at(x, y) == FLOOR
        assert g.get(x, y).parent_room is b


def test_apply_shapes_reports_carved_rooms_in_order():
    g = Grid(60, 20)
    rooms = [make_room(g, Rect(2 + 18 * i, 2, 16 + 18 * i, 16), index=i) for i in range(3)]
    cfg = ShapeConfig(rectangle_chance=0)
    changes = apply_shapes(rooms, g, cfg, random.Random(8))
    assert list(changes) == rooms
    for room, cells in changes.items():
        assert room.shape is not RoomShape.RECTANGLE
        assert cells


def test_shaping_is_deterministic():
    def run():
        g = Grid(30, 30)
        room = make_room(g, Rect(3, 3, 25, 22))
        apply_shapes([room], g, ShapeConfig(), random.Random(1010))
        return room.shape, g.to_rows()

    assert run() == run()


@pytest.mark.parametrize("side", [6, 9, 12])
@pytest.mark.parametrize("seed", range(12))
def test_recess_length_is_at_most_a_third_of_its_side(side, seed):
    g = Grid(side + 4, side + 4)
    rect = Rect(2, 2, 2 + side, 2 + side)
    room = make_room(g, rect)
    removed = apply_shape(room, g, RoomShape.RECESSES, ShapeConfig(recess_count=1), random.Random(seed))
    box = _bbox(removed)
    assert len(removed) == box.area
    if box.y0 == rect.y0 or box.y1 == rect.y1:
        along = box.width
    else:
        along = box.height
    assert along <= side // 3
