from __future__ import annotations

"""CLI for quizterm: interactive menu, direct runs and bank inspection."""

import argparse
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..bank.repository import QuestionBank, load_bank
from ..config.config import Configuration
from ..errors import InvalidConfigValue, LoadError
from ..logging_setup import level_for_verbosity, setup_console_logging
from ..remote.http_source import HttpQuestionSource
from ..util.randomness import make_rng
from .quiz_manager import QuizManager
from .terminal_ui import TerminalUI

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="quizterm", description="Interactive terminal quiz")
    p.add_argument("--config", default=None, help="Path to a JSON/YAML config file")
    p.add_argument("--bank", default=None, help="Path to a JSON/YAML question bank")
    p.add_argument("--api-url", dest="api_url", default=None, help="Base URL of a remote question bank")
    p.add_argument("--seed", type=int, default=None, help="Seed for question shuffling (default: $SEED)")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")
    p.add_argument("--version", action="store_true", help="Print version and exit")

    sub = p.add_subparsers(dest="cmd")
    sub.add_parser("menu", help="Interactive menu (default)")

    rp = sub.add_parser("run", help="Start a quiz immediately")
    rp.add_argument("--questions", type=int, default=None)
    rp.add_argument("--category", action="append", default=None, help="Repeat for several categories")
    rp.add_argument("--difficulty", action="append", default=None, help="Repeat for several difficulties")
    rp.add_argument("--time-limit", dest="time_limit", type=int, default=None)
    rp.add_argument("--no-shuffle", dest="shuffle", action="store_false")
    rp.set_defaults(shuffle=None)

    sub.add_parser("list-categories", help="Show categories and difficulties in the bank")
    sub.add_parser("show-config", help="Print the effective configuration")

    args = p.parse_args(argv)
    if args.cmd is None:
        args.cmd = "menu"
    return args


def _apply_run_overrides(cfg: Configuration, args: argparse.Namespace) -> None:
    overrides = {
        "max_questions": args.questions,
        "categories": args.category,
        "difficulties": args.difficulty,
        "time_limit": args.time_limit,
        "shuffle_questions": args.shuffle,
    }
    for key, value in overrides.items():
        if value is not None:
            cfg.set(key, value)


def _print_bank(bank: QuestionBank) -> None:
    for cat in bank.categories():
        parts = [f"{d} ({len(bank.questions_for([cat], [d]))})" for d in bank.difficulties(cat)]
        print(f"{cat}: {', '.join(parts)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    if args.version:
        print(f"quizterm {__version__}")
        return 0

    setup_console_logging(level_for_verbosity(args.verbose))

    cfg = Configuration(args.config)
    try:
        bank = load_bank(args.bank)
    except LoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.cmd == "list-categories":
        _print_bank(bank)
        return 0

    if args.cmd == "show-config":
        for key, value in cfg.as_dict().items():
            if key == "theme":
                value = ", ".join(sorted(value))
            print(f"{key}: {value}")
        return 0

    source = HttpQuestionSource(args.api_url) if args.api_url else None
    manager = QuizManager(bank, cfg, source, rng=make_rng(args.seed))
    ui = TerminalUI(manager, config_path=args.config)

    try:
        if args.cmd == "run":
            try:
                _apply_run_overrides(cfg, args)
            except InvalidConfigValue as e:
                print(f"ERROR: {e}", file=sys.stderr)
                return 2
            ui.start_quiz()
            return 0
        return ui.run()
    except EOFError:
        return 0
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    finally:
        manager.wait_for_submission(timeout=5)


if __name__ == "__main__":
    raise SystemExit(main())
