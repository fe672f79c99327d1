import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve.dungeon import DungeonConfig, ShapeConfig  # noqa: E402
from delve.dungeon.cells import Grid  # noqa: E402


def pytest_configure(config):  # register custom markers
    config.addinivalue_line("markers", "structure: structural layout invariants over generated dungeons")
    config.addinivalue_line("markers", "performance: generation time guardrails")


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Drop DUNGEON_*/DELVE_* from the caller's shell and undo anything a test
    (or load_dotenv) adds to os.environ."""
    for key in list(os.environ):
        if key.startswith(("DUNGEON_", "DELVE_")):
            monkeypatch.delenv(key)
    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def grid():
    return Grid(40, 30)


@pytest.fixture
def small_config():
    return DungeonConfig(dungeon_width=60, dungeon_length=60, seed=7)


@pytest.fixture
def shaped_config():
    return DungeonConfig(dungeon_width=80, dungeon_length=80, seed=11, shapes=ShapeConfig())
