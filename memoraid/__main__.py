"""CLI interface for Memoraid.

Usage:
    python -m memoraid stats items.json                   Show mastery and retention
    python -m memoraid due items.json                     List items due for review
    python -m memoraid plan items.json -e 2026-12-01      Print a study plan for an exam
    python -m memoraid serve                              Run the HTTP API

``items.json`` holds a JSON list of learning items in the API's item format.
"""

import argparse
import logging
import sys
from datetime import date, datetime, time
from pathlib import Path

import uvicorn
from pydantic import TypeAdapter, ValidationError

from memoraid.api.schemas import LearningItemSchema
from memoraid.config import now_ms
from memoraid.models import LearningItem, TaskStatus
from memoraid.srs.performance import analyze_global_performance
from memoraid.srs.planner import InvalidHorizonError, generate_plan, resolve_timezone
from memoraid.srs.retention import default_model

logger = logging.getLogger(__name__)

_items_adapter = TypeAdapter(list[LearningItemSchema])


def load_items(path: Path) -> list[LearningItem]:
    """Read a JSON list of learning items from ``path``."""
    schemas = _items_adapter.validate_json(path.read_bytes())
    items = [schema.to_domain() for schema in schemas]
    logger.debug("Loaded %d items from %s", len(items), path)
    return items


def exam_date_ms(day: date) -> int:
    """Return midnight of ``day`` in the planning zone as epoch ms."""
    midnight = datetime.combine(day, time.min, tzinfo=resolve_timezone())
    return int(midnight.timestamp() * 1000)


def cmd_stats(args: argparse.Namespace) -> None:
    """Show global mastery and retention."""
    items = load_items(args.items)
    stats = analyze_global_performance(items)

    print()
    print(f"  Items:      {len(items)}")
    print(f"  Mastery:    {stats.global_mastery}%")
    print(f"  Retention:  {stats.retention_average}%")
    print(f"  Due:        {stats.due_count} ({stats.overdue_count} overdue)")
    print(f"  Upcoming:   {stats.upcoming_count}")
    print()


def cmd_due(args: argparse.Namespace) -> None:
    """List the items due for review, weakest retention first."""
    items = load_items(args.items)
    now = now_ms()
    due = [item for item in items if default_model.is_due(item, now)]
    due.sort(key=lambda item: default_model.retention_probability(item, now))

    if not due:
        print("  Nothing due. Well done!")
        return

    for item in due:
        marker = "!" if default_model.is_overdue(item, now) else " "
        retention = default_model.retention_probability(item, now)
        print(f" {marker} {item.title or item.id:<40} retention {retention:>3}%")
    print(f"\n  {len(due)} of {len(items)} items due")


def cmd_plan(args: argparse.Namespace) -> int:
    """Print a day-by-day study plan."""
    items = load_items(args.items)
    try:
        plan = generate_plan(args.name, items, exam_date_ms(args.exam_date), args.minutes)
    except InvalidHorizonError as e:
        print(f"  Error: {e}", file=sys.stderr)
        return 1

    print(f"\n  {plan.name}: {len(plan.schedule)} days, {args.minutes} min/day\n")
    for session in plan.schedule:
        if session.is_rest_day:
            print(f"  {session.date.isoformat()}  rest")
            continue
        print(f"  {session.date.isoformat()}  {session.total_minutes} min")
        for task in session.tasks:
            check = "x" if task.status is TaskStatus.COMPLETED else " "
            print(f"      [{check}] {task.title} ({task.estimated_minutes} min)")
    print()
    return 0


def cmd_serve(args: argparse.Namespace) -> None:
    """Serve the HTTP API."""
    uvicorn.run("memoraid.main:app", host=args.host, port=args.port)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the Memoraid CLI application."""
    parser = argparse.ArgumentParser(
        prog="memoraid",
        description="Memoraid spaced repetition planner",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    stats_parser = subparsers.add_parser("stats", help="Show mastery and retention")
    stats_parser.add_argument("items", type=Path, help="JSON file of learning items")

    due_parser = subparsers.add_parser("due", help="List items due for review")
    due_parser.add_argument("items", type=Path, help="JSON file of learning items")

    plan_parser = subparsers.add_parser("plan", help="Print a study plan for an exam")
    plan_parser.add_argument("items", type=Path, help="JSON file of learning items")
    plan_parser.add_argument(
        "-e", "--exam-date", type=date.fromisoformat, required=True, help="Exam day (YYYY-MM-DD)"
    )
    plan_parser.add_argument(
        "-m", "--minutes", type=int, default=60, help="Study minutes per day (default: 60)"
    )
    plan_parser.add_argument("-n", "--name", default="Exam Prep", help="Plan name")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("-p", "--port", type=int, default=8000, help="Port (default: 8000)")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "serve":
        cmd_serve(args)
        return 0

    try:
        if args.command == "plan":
            return cmd_plan(args)
        cmd_map = {
            "stats": cmd_stats,
            "due": cmd_due,
        }
        cmd_map[args.command](args)
    except (OSError, ValidationError) as e:
        print(f"  Could not read items: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
