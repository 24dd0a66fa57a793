from __future__ import annotations

import argparse
import configparser
import json
import logging
import sys
from typing import Optional, Sequence

from freecell.deal_parser import DealParseError, deal_game, load_game_state
from freecell.render import render_solution, render_state
from solver.settings import limits_from_settings, load_settings, policy_from_settings
from solver.state_graph import solve_state

logger = logging.getLogger(__name__)

EXIT_SOLVED = 0
EXIT_NOT_SOLVED = 1
EXIT_BAD_INPUT = 2


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find a shortest solution for a FreeCell deal.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--deal", type=str, help="Path of a deal file.")
    source.add_argument("--seed", type=int, help="Numbered deal from classic Windows FreeCell.")
    parser.add_argument("--config", type=str, default=None, help="Ini file with a [search] section.")
    parser.add_argument("--max-nodes", type=int, default=None, help="Expanded state limit (0 = unlimited).")
    parser.add_argument("--max-seconds", type=float, default=None, help="Time limit in seconds (0 = unlimited).")
    parser.add_argument("--max-frontier", type=int, default=None, help="Frontier size limit (0 = unlimited).")
    parser.add_argument(
        "--collapse-symmetric",
        action="store_true",
        help="Treat states that only differ by cascade order as the same state.",
    )
    parser.add_argument("--show-state", action="store_true", help="Print the initial table before solving.")
    parser.add_argument("--json", action="store_true", help="Print the result as json.")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print json output.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level for search progress.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(args.config)
        if args.deal is not None:
            state = load_game_state(args.deal)
        else:
            state = deal_game(args.seed)
    except (DealParseError, UnicodeDecodeError, OSError, configparser.Error) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    for key in ("max_nodes", "max_seconds", "max_frontier"):
        value = getattr(args, key)
        if value is not None:
            settings[key] = str(value)
    if args.collapse_symmetric:
        settings["collapse_cascade_permutations"] = "true"
    logger.debug("search settings: %s", settings)

    if args.show_state:
        print(render_state(state))
        print()

    result = solve_state(state, limits=limits_from_settings(settings), policy=policy_from_settings(settings))

    if args.json:
        payload = result.to_dict()
        payload["seed"] = args.seed
        payload["deal"] = args.deal
        if args.pretty:
            print(json.dumps(payload, ensure_ascii=False, indent=2))
        else:
            print(json.dumps(payload, ensure_ascii=False))
    elif result.solved:
        print(render_solution(result.solution))
    elif result.status == "truncated":
        print(f"Search stopped ({result.stop_reason}) after {result.expanded_nodes} states; no solution found yet")
    else:
        print(render_solution(None))

    return EXIT_SOLVED if result.solved else EXIT_NOT_SOLVED


if __name__ == "__main__":
    sys.exit(main())
