import pytest

from delve.dungeon import ConfigError, Dungeon, DungeonConfig, ShapeConfig


@pytest.mark.parametrize(
    "kwargs",
    [
        {"dungeon_width": 0},
        {"dungeon_length": -5},
        {"room_width_min": 3},
        {"room_length_min": 200},
        {"max_iterations": -1},
        {"corridor_width": 0},
        {"room_bottom_corner_modifier": 0.5},
        {"room_top_corner_modifier": 0.5},
        {"room_offset": 3},
        {"corridor_mode": "astar"},
        {"seed": "banana"},
        {"seed": True},
        {"shapes": ShapeConfig(cutout_min_size=0.6, cutout_max_size=0.5)},
        {"shapes": ShapeConfig(recess_count=0)},
        {"shapes": ShapeConfig(l_shape_chance=-0.1)},
        {"shapes": ShapeConfig(*([0.0] * 7))},
    ],
)
def test_invalid_configs_are_rejected(kwargs):
    with pytest.raises(ConfigError):
        DungeonConfig(**kwargs).validate()


def test_invalid_config_fails_before_generation():
    with pytest.raises(ConfigError):
        Dungeon(DungeonConfig(room_offset=5))


def test_defaults_validate():
    cfg = DungeonConfig()
    assert cfg.validate() is cfg
    assert cfg.effective_corridor_width == 5
    assert DungeonConfig(corridor_width=2).effective_corridor_width == 5
    assert DungeonConfig(corridor_width=9).effective_corridor_width == 9


def test_from_env_overrides():
    env = {
        "DUNGEON_WIDTH": "64",
        "DUNGEON_LENGTH": " 48 ",
        "DUNGEON_MAX_ITERATIONS": "4",
        "DUNGEON_SEED": "99",
        "DUNGEON_CORRIDOR_MODE": "Bounding_Box",
        "DUNGEON_VARIED_SHAPES": "1",
    }
    cfg = DungeonConfig.from_env(environ=env)
    assert (cfg.dungeon_width, cfg.dungeon_length, cfg.max_iterations) == (64, 48, 4)
    assert cfg.seed == 99
    assert cfg.corridor_mode == "bounding_box"
    assert isinstance(cfg.shapes, ShapeConfig)


def test_from_env_keeps_base_and_leaves_it_untouched():
    base = DungeonConfig(dungeon_width=30, seed=3, shapes=ShapeConfig())
    cfg = DungeonConfig.from_env(base, environ={"DUNGEON_VARIED_SHAPES": "off"})
    assert cfg.dungeon_width == 30 and cfg.seed == 3
    assert cfg.shapes is None
    assert base.shapes is not None


@pytest.mark.parametrize("raw", ["random", "RANDOM", "none", ""])
def test_from_env_random_seed(raw):
    assert DungeonConfig.from_env(DungeonConfig(seed=5), environ={"DUNGEON_SEED": raw}).seed is None


def test_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv("DUNGEON_WIDTH", "77")
    assert DungeonConfig.from_env().dungeon_width == 77


@pytest.mark.parametrize("key", ["DUNGEON_WIDTH", "DUNGEON_CORRIDOR_WIDTH", "DUNGEON_SEED"])
def test_from_env_bad_integer(key):
    with pytest.raises(ConfigError) as exc:
        DungeonConfig.from_env(environ={key: "wide"})
    assert key in str(exc.value)


def test_describe_is_plain_data():
    out = DungeonConfig(shapes=ShapeConfig()).describe()
    assert out["dungeon_width"] == 100
    assert out["shapes"]["recess_count"] == 2
    assert DungeonConfig().describe()["shapes"] is None


def test_shape_weights_order():
    assert ShapeConfig().weights() == (0.4, 0.2, 0.15, 0.1, 0.1, 0.05, 0.15)
