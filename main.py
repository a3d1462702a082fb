#!/usr/bin/env python

"""
Time Ledger - Main Entry Point

Books work hours against project tasks and reports daily totals. No calendar
date may ever carry more than 24 booked hours.

Usage:
    python main.py summary
    python main.py day <YYYY-MM-DD>
    python main.py month <year> <month>
    python main.py entries <year> <month>
    python main.py log <task_id> <YYYY-MM-DD> <hours> <description...>
    python main.py tasks
    python main.py projects
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from timeledger.domain.responses import ApiResponse
from timeledger.infra.config import get_settings
from timeledger.infra.db import init_db
from timeledger.services import ProjectService, TaskService, TimeEntryService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Time Ledger: book hours and read daily totals.")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("summary", help="Totals of every day that has entries")

    day = commands.add_parser("day", help="Summary of one date")
    day.add_argument("date", help="YYYY-MM-DD")

    for name, help_text in (("month", "Per-day summary of a month"), ("entries", "Entries of a month")):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("year", type=int)
        sub.add_argument("month", type=int)

    log = commands.add_parser("log", help="Book hours against a task")
    log.add_argument("task_id", type=int)
    log.add_argument("date", help="YYYY-MM-DD")
    log.add_argument("hours", help="Decimal hours, e.g. 7.5")
    log.add_argument("description", nargs="+")

    commands.add_parser("tasks", help="List all tasks")
    commands.add_parser("projects", help="List all projects")
    return parser


def _print_response(response: ApiResponse) -> int:
    print(f"[{int(response.status_code)}] {response.message}")
    data = response.data
    if isinstance(data, list):
        for item in data:
            print(f"  {item.model_dump_json()}")
    elif data is not None and hasattr(data, "model_dump_json"):
        print(f"  {data.model_dump_json()}")
    return 0 if response.is_success else 1


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    await init_db(settings.get_db_url())

    entries = TimeEntryService(work_hours_per_day=settings.preferences.work_hours_per_day)

    if args.command == "summary":
        response = await entries.get_daily_summary()
    elif args.command == "day":
        response = await entries.get_day_summary(args.date)
    elif args.command == "month":
        response = await entries.get_month_summary(args.year, args.month)
    elif args.command == "entries":
        response = await entries.get_time_entries_by_month(args.year, args.month)
    elif args.command == "log":
        response = await entries.create_time_entry(
            task_id=args.task_id, date=args.date, hours=args.hours, description=" ".join(args.description)
        )
    elif args.command == "tasks":
        response = await TaskService().get_all_tasks()
    else:
        response = await ProjectService().get_all_projects()
    return _print_response(response)


def main(argv=None):
    """Main entry point"""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
