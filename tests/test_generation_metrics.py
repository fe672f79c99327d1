from delve.dungeon import Dungeon, DungeonConfig, ShapeConfig
from delve.dungeon.shapes import SHAPE_ORDER
from delve.dungeon.tiles import CELL_TYPES


def test_generation_metrics_present(monkeypatch):
    monkeypatch.setenv('DUNGEON_ENABLE_GENERATION_METRICS', '1')
    d = Dungeon(DungeonConfig(dungeon_width=60, dungeon_length=60, seed=4242, shapes=ShapeConfig()))
    m = d.metrics
    for key in ['leaves', 'rooms', 'shapes_applied', 'corridors', 'corridors_straight', 'corridors_bent',
                'corridor_failures', 'tiles', 'wall_segments', 'runtime_ms', 'phase_ms']:
        assert key in m, f"missing metric {key}"
    assert set(m['phase_ms']) == {'partition', 'rooms', 'shapes', 'bounds', 'corridors', 'walls'}
    assert all(v >= 0 for v in m['phase_ms'].values())
    assert m['rooms'] == len(d.rooms) == m['leaves']
    assert sum(m['shapes_applied'].values()) == m['rooms']
    assert set(m['shapes_applied']) == {s.value for s in SHAPE_ORDER}
    assert m['corridors_straight'] + m['corridors_bent'] == m['corridors']
    assert m['corridors'] + m['corridor_failures'] == m['leaves'] - 1
    assert set(m['tiles']) == set(CELL_TYPES)
    assert sum(m['tiles'].values()) == 60 * 60
    assert m['corners_convex'] + m['corners_concave'] + m['corners_saddle'] == len(d.walls.corners)
    assert m['wall_segments'] == d.walls.segment_count > 0


def test_no_shape_phase_without_shapes(monkeypatch):
    monkeypatch.setenv('DUNGEON_ENABLE_GENERATION_METRICS', 'true')
    d = Dungeon(DungeonConfig(dungeon_width=50, dungeon_length=50, seed=1))
    assert 'shapes' not in d.metrics['phase_ms']
    assert d.metrics['shapes_applied']['rectangle'] == len(d.rooms)
    assert d.metrics['cells_carved_by_shapes'] == 0


def test_generation_metrics_disabled(monkeypatch):
    monkeypatch.setenv('DUNGEON_ENABLE_GENERATION_METRICS', '0')
    d = Dungeon(DungeonConfig(dungeon_width=50, dungeon_length=50, seed=4242))
    assert d.metrics == {}
    assert d.rooms


def test_metrics_flag_respected_without_env():
    d = Dungeon(DungeonConfig(dungeon_width=50, dungeon_length=50, seed=3), enable_metrics=False)
    assert d.metrics == {}
