from __future__ import annotations

import heapq
import logging
import time
from dataclasses import dataclass
from typing import Callable, Hashable, Optional

from freecell.game_state import GameMove, GameState
from freecell.position import FOUNDATIONS, FREECELLS, Position

logger = logging.getLogger(__name__)

Transition = tuple[GameMove, GameState]
MoveCost = Callable[[GameMove], int]


def uniform_cost(move: GameMove) -> int:
    return 1


@dataclass(frozen=True, slots=True)
class SearchLimits:
    """Optional bounds on one search; None means unbounded."""

    max_nodes: Optional[int] = None
    max_seconds: Optional[float] = None
    max_frontier: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SearchPolicy:
    # Several empty cascades are interchangeable targets; offer only the first.
    limit_empty_destinations: bool = True
    # Moving a lone card into another empty cascade only permutes the cascades.
    skip_lone_card_to_empty: bool = True
    # Deduplicate states that differ only by the order of their cascades.
    collapse_cascade_permutations: bool = False
    progress_every: int = 50_000


DEFAULT_POLICY = SearchPolicy()


@dataclass(slots=True)
class SolveResult:
    status: str
    stop_reason: str
    solution: tuple[GameMove, ...]
    cost: Optional[int]
    expanded_nodes: int
    generated_nodes: int
    unique_states: int
    duplicate_states_skipped: int
    stale_entries_skipped: int
    max_frontier: int
    elapsed_ms: float

    @property
    def solved(self) -> bool:
        return self.status == "solved"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "stop_reason": self.stop_reason,
            "solution": [str(move) for move in self.solution],
            "solution_len": len(self.solution),
            "cost": self.cost,
            "metrics": {
                "expanded_nodes": self.expanded_nodes,
                "generated_nodes": self.generated_nodes,
                "unique_states": self.unique_states,
                "duplicate_states_skipped": self.duplicate_states_skipped,
                "stale_entries_skipped": self.stale_entries_skipped,
                "max_frontier": self.max_frontier,
                "elapsed_ms": round(self.elapsed_ms, 3),
            },
        }


def _source_positions(state: GameState) -> list[Position]:
    sources = [Position.cascade(i) for i, cascade in enumerate(state.cascades) if len(cascade) > 0]
    if len(state.freecells) > 0:
        sources.append(FREECELLS)
    return sources


def legal_moves(state: GameState, policy: SearchPolicy = DEFAULT_POLICY) -> list[Transition]:
    """Every single-card move out of ``state`` with the state it leads to."""

    out: list[Transition] = []
    destinations = state.positions()
    for source in _source_positions(state):
        for popped, card in state.pile_at(source).pop_card():
            lone_card = source.is_cascade and len(popped) == 0
            after_pop = state.with_pile(source, popped)
            used_empty = False
            for dest in destinations:
                if dest == source:
                    continue
                dest_pile = state.pile_at(dest)
                if dest.is_cascade and len(dest_pile) == 0:
                    if policy.skip_lone_card_to_empty and lone_card:
                        continue
                    if policy.limit_empty_destinations and used_empty:
                        continue
                    used_empty = True
                added = dest_pile.add_card(card)
                if added is None:
                    continue
                move = GameMove(source=source, destination=dest, card=card)
                out.append((move, after_pop.with_pile(dest, added)))
    return out


def canonical_key(state: GameState) -> tuple:
    """Dedup key that ignores the order of the cascades."""
    return tuple(sorted(cascade.cards for cascade in state.cascades)), state.foundations, state.freecells


class StateGraph:
    """
    Dijkstra search over the implicit graph of game states.

    Nodes are ``GameState`` values, edges are ``GameMove`` values weighted by
    ``move_cost``. With the default uniform cost the returned path is a
    shortest one in number of moves.
    """

    def __init__(
        self,
        initial_state: GameState,
        policy: SearchPolicy = DEFAULT_POLICY,
        limits: SearchLimits = SearchLimits(),
        move_cost: MoveCost = uniform_cost,
    ):
        self.initial_state = initial_state
        self.policy = policy
        self.limits = limits
        self.move_cost = move_cost
        self.result: Optional[SolveResult] = None

    def _key(self, state: GameState) -> Hashable:
        if self.policy.collapse_cascade_permutations:
            return canonical_key(state)
        return state

    def dijkstra(self) -> Optional[list[GameMove]]:
        """Shortest move list to a solved state, or None if there is none."""
        result = self.search()
        if not result.solved:
            return None
        return list(result.solution)

    def search(self) -> SolveResult:
        start = time.perf_counter()
        limits = self.limits
        key_of = self._key

        initial = self.initial_state
        # key -> best known cost; key -> (state, predecessor key, move)
        best_cost: dict[Hashable, int] = {key_of(initial): 0}
        parent: dict[Hashable, tuple[GameState, Optional[Hashable], Optional[GameMove]]] = {
            key_of(initial): (initial, None, None)
        }
        expanded: set[Hashable] = set()

        counter = 0
        frontier: list[tuple[int, int, Hashable]] = [(0, counter, key_of(initial))]

        generated = 1
        duplicates = 0
        stale = 0
        max_frontier = 1
        stop_reason = "search_space_exhausted"
        status = "unsolvable"

        logger.debug("search started: policy=%s limits=%s", self.policy, limits)

        while frontier:
            if limits.max_nodes is not None and len(expanded) >= limits.max_nodes:
                status, stop_reason = "truncated", "max_nodes"
                break
            if limits.max_seconds is not None and time.perf_counter() - start >= limits.max_seconds:
                status, stop_reason = "truncated", "max_seconds"
                break
            if limits.max_frontier is not None and len(frontier) > limits.max_frontier:
                status, stop_reason = "truncated", "max_frontier"
                break

            cost, _, key = heapq.heappop(frontier)
            if key in expanded or cost > best_cost[key]:
                stale += 1
                continue
            expanded.add(key)
            state = parent[key][0]

            if state.is_solved():
                solution = self._reconstruct(key, parent)
                self.result = SolveResult(
                    status="solved",
                    stop_reason="goal_reached",
                    solution=solution,
                    cost=cost,
                    expanded_nodes=len(expanded),
                    generated_nodes=generated,
                    unique_states=len(best_cost),
                    duplicate_states_skipped=duplicates,
                    stale_entries_skipped=stale,
                    max_frontier=max_frontier,
                    elapsed_ms=(time.perf_counter() - start) * 1000.0,
                )
                logger.info(
                    "solved in %d moves after expanding %d states (%.1f ms)",
                    len(solution), len(expanded), self.result.elapsed_ms,
                )
                return self.result

            for move, succ in legal_moves(state, self.policy):
                generated += 1
                succ_key = key_of(succ)
                next_cost = cost + self.move_cost(move)
                known = best_cost.get(succ_key)
                if known is not None and known <= next_cost:
                    duplicates += 1
                    continue
                best_cost[succ_key] = next_cost
                parent[succ_key] = (succ, key, move)
                counter += 1
                heapq.heappush(frontier, (next_cost, counter, succ_key))

            if len(frontier) > max_frontier:
                max_frontier = len(frontier)
            if self.policy.progress_every > 0 and len(expanded) % self.policy.progress_every == 0:
                logger.debug(
                    "expanded=%d frontier=%d unique=%d cost=%d",
                    len(expanded), len(frontier), len(best_cost), cost,
                )

        self.result = SolveResult(
            status=status,
            stop_reason=stop_reason,
            solution=(),
            cost=None,
            expanded_nodes=len(expanded),
            generated_nodes=generated,
            unique_states=len(best_cost),
            duplicate_states_skipped=duplicates,
            stale_entries_skipped=stale,
            max_frontier=max_frontier,
            elapsed_ms=(time.perf_counter() - start) * 1000.0,
        )
        logger.info(
            "search stopped: status=%s reason=%s expanded=%d",
            status, stop_reason, len(expanded),
        )
        return self.result

    @staticmethod
    def _reconstruct(
        goal: Hashable,
        parent: dict[Hashable, tuple[GameState, Optional[Hashable], Optional[GameMove]]],
    ) -> tuple[GameMove, ...]:
        moves: list[GameMove] = []
        cur = goal
        while True:
            _, prev, move = parent[cur]
            if prev is None or move is None:
                break
            moves.append(move)
            cur = prev
        moves.reverse()
        return tuple(moves)


def solve_state(
    initial_state: GameState,
    limits: SearchLimits = SearchLimits(),
    policy: SearchPolicy = DEFAULT_POLICY,
    move_cost: MoveCost = uniform_cost,
) -> SolveResult:
    return StateGraph(initial_state, policy=policy, limits=limits, move_cost=move_cost).search()
