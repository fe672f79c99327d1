"""Terminal rendering of a grid for the CLI."""
from __future__ import annotations

from typing import List

from colorama import Back, Fore, Style

from .cells import Grid
from .tiles import CORRIDOR, DOOR, EMPTY, FLOOR, WALL

GLYPHS = {
    EMPTY: " ",
    FLOOR: ".",
    WALL: "#",
    CORRIDOR: ",",
    DOOR: "+",
}

COLORS = {
    EMPTY: "",
    FLOOR: Fore.WHITE,
    WALL: Fore.YELLOW + Style.BRIGHT,
    CORRIDOR: Fore.CYAN,
    DOOR: Fore.MAGENTA + Back.BLACK,
}


def render_rows(grid: Grid, color: bool = False, raw: bool = False) -> List[str]:
    """Rows top-first. ``raw`` keeps the one-letter cell codes."""
    rows = grid.to_rows()
    if raw:
        return rows
    out = []
    for row in rows:
        if not color:
            out.append("".join(GLYPHS[c] for c in row))
            continue
        out.append("".join(f"{COLORS[c]}{GLYPHS[c]}{Style.RESET_ALL}" if COLORS[c] else GLYPHS[c] for c in row))
    return out


def render(grid: Grid, color: bool = False, raw: bool = False) -> str:
    return "\n".join(render_rows(grid, color=color, raw=raw))


__all__ = ["GLYPHS", "render_rows", "render"]
