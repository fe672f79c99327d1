#!/usr/bin/env python3
"""Dungeon structural diagnostics for specific seeds.

Usage:
  DUNGEON_VARIED_SHAPES=1 python scripts/diagnose_seeds.py 292372 730727

If no seeds are provided as CLI args, a default list is used. Layout
parameters come from the ``DUNGEON_*`` environment variables.
Exits with non-zero status if structural issues are detected.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import replace
from typing import List

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from delve.dungeon import Dungeon, DungeonConfig  # noqa: E402 import after path fix
from delve.dungeon.diagnostics import analyze  # noqa: E402 import after path fix

DEFAULT_SEEDS = [292372, 730727]


def run_for_seed(seed: int, base: DungeonConfig) -> dict:
    d = Dungeon(replace(base, seed=seed))
    res = analyze(d)
    res["metrics"] = {k: d.metrics.get(k) for k in ("corridors_straight", "corridors_bent", "runtime_ms")}
    return res


def main(argv: List[str]) -> int:
    seeds = [int(a) for a in argv] if argv else DEFAULT_SEEDS
    base = DungeonConfig.from_env()
    results = [run_for_seed(s, base) for s in seeds]
    print(json.dumps({"results": results}, indent=2))
    # Non-zero exit if any failure
    if not all(r["ok"] for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
