"""
Entry point for the Huay lottery back end.

Usage:
  python server.py serve --host 0.0.0.0 --port 5000
  python server.py settle --draw-id 12
  python server.py settle --lottery-type THAI_GOV --draw-date 2024-01-01
"""

from __future__ import annotations

import argparse
import logging
import sys

from config import DB_PATH, DEBUG, LOG_LEVEL

# Configure logging before anything else creates loggers
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,
)
logger = logging.getLogger("huay")

# discord.py installs its own handler on import; route it through ours instead
_discord_logger = logging.getLogger("discord")
_discord_logger.handlers.clear()
_discord_logger.setLevel(logging.WARNING)

from infrastructure.service_container import ServiceConfig, ServiceContainer  # noqa: E402
from services.errors import LotteryError  # noqa: E402
from web import create_app  # noqa: E402


def _serve(args: argparse.Namespace) -> int:
    container = ServiceContainer(ServiceConfig(db_path=args.db_path))
    app = create_app(container)
    logger.info(f"Serving on {args.host}:{args.port} (db={args.db_path})")
    app.run(host=args.host, port=args.port, debug=DEBUG)
    return 0


def _settle(args: argparse.Namespace) -> int:
    container = ServiceContainer(ServiceConfig(db_path=args.db_path, notify_async=False))
    container.initialize()
    settlement = container.settlement_service
    try:
        if args.draw_id is not None:
            summary = settlement.process_result(args.draw_id)
        else:
            summary = settlement.process_draw(args.lottery_type, args.draw_date)
    except LotteryError as exc:
        logger.error(f"Settlement refused ({exc.code}): {exc.message}")
        return 1
    print(
        f"Draw {summary.draw_id} {summary.lottery_type} {summary.draw_date}: "
        f"won={summary.won_count} lost={summary.lost_count} "
        f"errors={summary.error_count} payout={summary.total_payout:.2f}"
    )
    return 0


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Huay lottery back end.")
    parser.add_argument("--db-path", default=DB_PATH, help="Path to SQLite DB (default: DB_PATH)")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)

    settle = sub.add_parser("settle", help="Settle a draw from the command line")
    target = settle.add_mutually_exclusive_group(required=True)
    target.add_argument("--draw-id", type=int)
    target.add_argument("--lottery-type")
    settle.add_argument("--draw-date", help="YYYY-MM-DD (with --lottery-type)")

    args = parser.parse_args(argv)
    if args.command == "settle":
        if args.lottery_type and not args.draw_date:
            parser.error("--draw-date is required with --lottery-type")
        return _settle(args)
    if args.command is None:
        args = parser.parse_args([*argv, "serve"])
    return _serve(args)


def cli() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
