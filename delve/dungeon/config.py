import os
import random
from dataclasses import dataclass, fields, replace
from typing import Optional, Union

CORRIDOR_MODES = ("smart", "bounding_box")
MIN_ROOM_DIMENSION = 4
MIN_CORRIDOR_WIDTH = 5
SEED_MAX = 2**31 - 1

_FALSEY = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Malformed generation parameters, raised before any partitioning."""


@dataclass
class ShapeConfig:
    """Per-shape weights plus the carving parameters the shapes share."""

    rectangle_chance: float = 0.4
    l_shape_chance: float = 0.2
    t_shape_chance: float = 0.15
    u_shape_chance: float = 0.1
    cross_shape_chance: float = 0.1
    circular_chance: float = 0.05
    with_recesses_chance: float = 0.15
    cutout_min_size: float = 0.3
    cutout_max_size: float = 0.5
    recess_count: int = 2
    min_size_for_shapes: int = 6

    def weights(self):
        return (
            self.rectangle_chance,
            self.l_shape_chance,
            self.t_shape_chance,
            self.u_shape_chance,
            self.cross_shape_chance,
            self.circular_chance,
            self.with_recesses_chance,
        )

    def validate(self):
        ws = self.weights()
        if any(w < 0 for w in ws):
            raise ConfigError("shape weights must be non-negative")
        if sum(ws) <= 0:
            raise ConfigError("at least one shape weight must be positive")
        if not (0 < self.cutout_min_size <= self.cutout_max_size < 1):
            raise ConfigError(
                f"cutout range must satisfy 0 < min <= max < 1 (got {self.cutout_min_size}..{self.cutout_max_size})"
            )
        if not (1 <= self.recess_count <= 4):
            raise ConfigError(f"recess_count must be within 1..4 (got {self.recess_count})")
        if self.min_size_for_shapes < 1:
            raise ConfigError("min_size_for_shapes must be positive")


@dataclass
class DungeonConfig:
    dungeon_width: int = 100
    dungeon_length: int = 100
    room_width_min: int = 10
    room_length_min: int = 10
    max_iterations: int = 10
    corridor_width: int = MIN_CORRIDOR_WIDTH
    room_bottom_corner_modifier: float = 0.1
    room_top_corner_modifier: float = 0.9
    room_offset: int = 1
    seed: Optional[Union[int, str]] = None
    shapes: Optional[ShapeConfig] = None
    corridor_mode: str = "smart"

    @property
    def effective_corridor_width(self) -> int:
        return max(MIN_CORRIDOR_WIDTH, self.corridor_width)

    def validate(self):
        if self.dungeon_width <= 0 or self.dungeon_length <= 0:
            raise ConfigError(
                f"dungeon dimensions must be positive (got {self.dungeon_width}x{self.dungeon_length})"
            )
        if self.room_width_min < MIN_ROOM_DIMENSION or self.room_length_min < MIN_ROOM_DIMENSION:
            raise ConfigError(f"minimum room size must be at least {MIN_ROOM_DIMENSION}")
        if self.room_width_min > self.dungeon_width or self.room_length_min > self.dungeon_length:
            raise ConfigError("minimum room size exceeds the dungeon extent")
        if self.max_iterations < 0:
            raise ConfigError("max_iterations must not be negative")
        if self.corridor_width <= 0:
            raise ConfigError("corridor_width must be positive")
        if not (0.0 <= self.room_bottom_corner_modifier <= 0.3):
            raise ConfigError("room_bottom_corner_modifier must lie in [0, 0.3]")
        if not (0.7 <= self.room_top_corner_modifier <= 1.0):
            raise ConfigError("room_top_corner_modifier must lie in [0.7, 1.0]")
        if self.room_offset not in (0, 1, 2):
            raise ConfigError(f"room_offset must be 0, 1 or 2 (got {self.room_offset})")
        if self.corridor_mode not in CORRIDOR_MODES:
            raise ConfigError(f"unknown corridor_mode {self.corridor_mode!r}")
        if isinstance(self.seed, bool) or (
            self.seed is not None and not isinstance(self.seed, int) and self.seed != "random"
        ):
            raise ConfigError(f"seed must be an integer, None or 'random' (got {self.seed!r})")
        if self.shapes is not None:
            self.shapes.validate()
        return self

    def resolve_seed(self, rng_source=None) -> int:
        """Concrete integer seed; ``None``/``"random"`` draws a fresh 31-bit one."""
        if isinstance(self.seed, int) and not isinstance(self.seed, bool):
            return self.seed
        source = rng_source or random.SystemRandom()
        return source.randint(0, SEED_MAX)

    @classmethod
    def from_env(cls, base: Optional["DungeonConfig"] = None, environ=None) -> "DungeonConfig":
        """Apply ``DUNGEON_*`` environment overrides on top of ``base``.

        Integer fields that do not parse raise ConfigError rather than being
        silently ignored.
        """
        env = os.environ if environ is None else environ
        cfg = replace(base) if base is not None else cls()
        int_map = {
            "DUNGEON_WIDTH": "dungeon_width",
            "DUNGEON_LENGTH": "dungeon_length",
            "DUNGEON_MAX_ITERATIONS": "max_iterations",
            "DUNGEON_CORRIDOR_WIDTH": "corridor_width",
            "DUNGEON_ROOM_WIDTH_MIN": "room_width_min",
            "DUNGEON_ROOM_LENGTH_MIN": "room_length_min",
        }
        for env_key, attr in int_map.items():
            if env_key in env:
                raw = env.get(env_key, "").strip()
                try:
                    setattr(cfg, attr, int(raw))
                except ValueError:
                    raise ConfigError(f"{env_key} must be an integer (got {raw!r})") from None
        if "DUNGEON_SEED" in env:
            raw = env.get("DUNGEON_SEED", "").strip()
            if raw.lower() in ("", "random", "none"):
                cfg.seed = None
            else:
                try:
                    cfg.seed = int(raw)
                except ValueError:
                    raise ConfigError(f"DUNGEON_SEED must be an integer or 'random' (got {raw!r})") from None
        if "DUNGEON_CORRIDOR_MODE" in env:
            cfg.corridor_mode = env.get("DUNGEON_CORRIDOR_MODE", "").strip().lower()
        if "DUNGEON_VARIED_SHAPES" in env:
            enabled = env.get("DUNGEON_VARIED_SHAPES", "").strip().lower() not in _FALSEY
            if enabled and cfg.shapes is None:
                cfg.shapes = ShapeConfig()
            elif not enabled:
                cfg.shapes = None
        return cfg

    def describe(self):
        out = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "shapes"}
        out["shapes"] = None if self.shapes is None else {f.name: getattr(self.shapes, f.name) for f in fields(self.shapes)}
        return out


def env_flag(name: str, default: bool) -> bool:
    if name not in os.environ:
        return default
    return os.environ.get(name, "").strip().lower() not in _FALSEY


__all__ = [
    "ConfigError",
    "DungeonConfig",
    "ShapeConfig",
    "CORRIDOR_MODES",
    "MIN_CORRIDOR_WIDTH",
    "SEED_MAX",
    "env_flag",
]
