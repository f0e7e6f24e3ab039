"""contents: fetch page text, highlights and summaries by URL."""

import argparse

from commands.dependencies import CommandContext
from commands.search import with_cost
from models.requests import DEFAULT_TEXT_MAX_CHARS, build_contents_request
from models.responses import to_output
from utils.output import OutputMode, TableData, render_json, render_table, truncate

MAX_INLINE_TEXT_CHARS = 2000


def register(subparsers) -> None:
    parser = subparsers.add_parser(
        "contents",
        help="Get page contents by URL",
        description="Retrieve text, highlights and summaries for the given URLs.",
        epilog=(
            "Examples:\n"
            "  exa contents https://example.com\n"
            "  exa contents https://example.com https://another.com\n"
            "  exa contents https://example.com --highlights --summary\n"
            "  exa contents https://example.com --no-text --summary"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("urls", nargs="+", help="Page URLs")
    parser.add_argument(
        "--text", action=argparse.BooleanOptionalAction, default=True,
        help="Include full text (default: on)",
    )
    parser.add_argument(
        "--text-max-chars", type=int, default=DEFAULT_TEXT_MAX_CHARS, help="Max chars for text"
    )
    parser.add_argument("--highlights", action="store_true", help="Include highlights")
    parser.add_argument("--summary", action="store_true", help="Include summary")
    parser.add_argument(
        "--max-age-hours", type=int, default=-1,
        help="Content freshness (-1=cache, 0=always livecrawl)",
    )
    parser.add_argument("--subpages", type=int, default=0, help="Subpages to crawl")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CommandContext) -> None:
    request = build_contents_request(
        args.urls,
        text=args.text,
        text_max_chars=args.text_max_chars,
        highlights=args.highlights,
        summary=args.summary,
        max_age_hours=args.max_age_hours,
        subpages=args.subpages,
    )
    response = ctx.client.get_contents(request)

    if ctx.options.mode is OutputMode.JSON:
        render_json(to_output(response), ctx.options)
        return

    table = TableData(
        headers=["TITLE", "URL"],
        rows=[[truncate(r.title, 60), r.url] for r in response.results],
        footer=with_cost(f"{len(response.results)} pages", response.cost_dollars),
    )
    render_table(table, to_output(response), ctx.options)

    for r in response.results:
        if r.text:
            print(f"\n--- {r.url} ---\n{truncate(r.text, MAX_INLINE_TEXT_CHARS)}")
        if r.summary:
            print(f"\nSummary: {r.summary}")
        if r.highlights:
            print("\nHighlights:")
            for highlight in r.highlights:
                print(f"  • {highlight}")
