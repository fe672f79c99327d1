from typing import Dict

from .shapes import SHAPE_ORDER


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'leaves': 0,
        'rooms': 0,
        'shapes_applied': {shape.value: 0 for shape in SHAPE_ORDER},
        'cells_carved_by_shapes': 0,
        'degenerate_rooms': 0,
        'corridors': 0,
        'corridors_straight': 0,
        'corridors_bent': 0,
        'corridor_failures': 0,
        'tiles': {},
        'corners_convex': 0,
        'corners_concave': 0,
        'corners_saddle': 0,
        'wall_segments': 0,
        'runtime_ms': 0.0,
    }
