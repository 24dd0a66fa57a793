from __future__ import annotations

from typing import Iterable, Optional

from freecell.cards import SUITS
from freecell.game_state import GameMove, GameState

CELL_WIDTH = 5


def _cell(card) -> str:
    return (str(card) if card is not None else "--").ljust(CELL_WIDTH)


def render_state(state: GameState) -> str:
    """Text picture of the table: free cells and foundation tops, then the cascades."""
    lines = []
    header = "".join(_cell(card) for card in state.freecells.slots)
    header += "| "
    header += "".join(_cell(pile[-1] if pile else None) for pile in (state.foundations.pile(s) for s in SUITS))
    lines.append(header.rstrip())
    lines.append("".join(f"{i}".ljust(CELL_WIDTH) for i in range(len(state.cascades))).rstrip())

    depth = max((len(cascade) for cascade in state.cascades), default=0)
    for row in range(depth):
        line = ""
        for cascade in state.cascades:
            if len(cascade) <= row:
                line += " " * CELL_WIDTH
                continue
            line += _cell(cascade.cards[row])
        lines.append(line.rstrip())
    return "\n".join(lines)


def render_solution(moves: Optional[Iterable[GameMove]]) -> str:
    if moves is None:
        return "No solution found"
    lines = [f"{i}. {move}" for i, move in enumerate(moves, start=1)]
    if not lines:
        return "Already solved"
    return "\n".join(lines)
