"""usage: request counts and credit usage for an API key."""

import argparse
from datetime import date, timedelta

from api.errors import ExaCLIError
from commands.dependencies import CommandContext
from models.requests import expand_date
from models.responses import UsageSummary, to_output
from utils.output import OutputMode, TableData, render_json, render_table

DEFAULT_WINDOW_DAYS = 30


def register(subparsers) -> None:
    parser = subparsers.add_parser(
        "usage",
        help="Show API usage and costs",
        description="Display request counts and credit usage over a time period.",
        epilog=(
            "Examples:\n"
            "  exa usage\n"
            "  exa usage --start-date 2025-01-01 --end-date 2025-01-31\n"
            "  exa usage --json"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--start-date", default="", help="Start of period (default: 30 days ago)")
    parser.add_argument("--end-date", default="", help="End of period (default: today)")
    parser.add_argument("--key-id", default="", help="Specific API key ID")
    parser.set_defaults(handler=run)


def resolve_window(start_date: str, end_date: str, today: date | None = None) -> tuple[str, str]:
    """Fill in the default window: the last 30 days ending today."""
    today = today or date.today()
    end = end_date or today.isoformat()
    start = start_date or (today - timedelta(days=DEFAULT_WINDOW_DAYS)).isoformat()
    # Validate format only; the endpoint takes plain dates
    expand_date(start)
    expand_date(end)
    return start, end


def build_table(entries, start: str, end: str) -> TableData:
    summary = UsageSummary.from_entries(entries)
    return TableData(
        headers=["DATE", "REQUESTS", "CREDITS"],
        rows=[[u.date, str(u.request_count), f"{u.credit_usage:.4f}"] for u in entries],
        footer=(
            f"Total: {summary.total_requests} requests, {summary.total_credits:.4f} credits"
            f" | {start} to {end}"
        ),
    )


def run(args: argparse.Namespace, ctx: CommandContext) -> None:
    start, end = resolve_window(args.start_date, args.end_date)

    key_id = args.key_id
    if not key_id:
        keys = ctx.client.list_api_keys()
        if not keys.api_keys:
            raise ExaCLIError("no API keys found")
        key_id = keys.api_keys[0].id
        ctx.debug(f"Using API key: {key_id} ({keys.api_keys[0].name or ''})")

    response = ctx.client.get_usage(key_id, start, end)

    if ctx.options.mode is OutputMode.JSON:
        render_json(to_output(response), ctx.options)
        return

    render_table(build_table(response.usage, start, end), to_output(response), ctx.options)
