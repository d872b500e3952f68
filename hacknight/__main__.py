"""
hacknight.__main__ — Maintenance CLI for ``python -m hacknight``
================================================================

Commands::

    python -m hacknight init-db          # create tables + seed badges
    python -m hacknight seed-badges      # insert missing badge definitions
    python -m hacknight recalc-streaks   # recompute every member's streak

Reads ``DATABASE_URL`` from ``.env``; ``recalc-streaks`` also reads the
streak policy from ``config.yaml`` when present.
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from hacknight.config import load_config
from hacknight.database.engine import create_db_engine, init_db
from hacknight.database.seed import seed_badges
from hacknight.services.streak_service import recalculate_all_streaks

logger = logging.getLogger("hacknight")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hacknight", description="Hack Night maintenance commands")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="Create tables and seed badge definitions")
    sub.add_parser("seed-badges", help="Insert missing badge definitions")
    sub.add_parser("recalc-streaks", help="Recompute and store every member's streak")
    return parser


def _skip_canceled(config_path: str) -> bool:
    try:
        return load_config(config_path).skip_canceled_events
    except FileNotFoundError:
        logger.warning("No config at %s — counting canceled events in streaks", config_path)
        return False


def main(argv: list[str] | None = None) -> int:
    """Run one maintenance command.  Returns the process exit code."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    load_dotenv()

    try:
        engine = create_db_engine()
    except RuntimeError as exc:
        logger.critical("%s", exc)
        return 1

    if args.command == "init-db":
        init_db(engine)
        return 0

    if args.command == "seed-badges":
        inserted = seed_badges(engine)
        logger.info("Badge seed completed — %d inserted", inserted)
        return 0

    summary = recalculate_all_streaks(engine, skip_canceled=_skip_canceled(args.config))
    logger.info(
        "Recalculated %d/%d streaks (%d failed)",
        summary["updated"], summary["checked"], summary["failed"],
    )
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
