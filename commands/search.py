"""search: web search with filters and optional page contents."""

import argparse

from commands.dependencies import CommandContext
from models.requests import CATEGORIES, DEFAULT_TEXT_MAX_CHARS, SEARCH_TYPES, build_search_request
from models.responses import CostInfo, SearchResult, to_output
from utils.output import OutputMode, TableData, render_json, render_table, truncate

RESULT_HEADERS = ["TITLE", "URL", "DATE", "SCORE"]

EXAMPLES = """Examples:
  exa search "hottest AI startups"
  exa search "climate change" --type deep -n 20
  exa search "machine learning" --category research_paper
  exa search "golang tutorials" --include-domains go.dev,gobyexample.com
  exa search "AI news" --start-date 2025-01-01 --highlights
  exa search "React hooks" --json --fields title,url,score"""


def csv_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def add_domain_filters(parser: argparse.ArgumentParser, noun: str = "search") -> None:
    parser.add_argument(
        "--include-domains", type=csv_list, action="extend", default=None,
        help=f"Only {noun} these domains (comma-separated)",
    )
    parser.add_argument(
        "--exclude-domains", type=csv_list, action="extend", default=None,
        help="Exclude these domains (comma-separated)",
    )
    parser.add_argument("--start-date", default="", help="Published after (YYYY-MM-DD)")
    parser.add_argument("--end-date", default="", help="Published before (YYYY-MM-DD)")


def result_rows(results: list[SearchResult], title_width: int = 50) -> list[list[str]]:
    rows = []
    for r in results:
        date = (r.published_date or "")[:10]
        score = f"{r.score:.2f}" if r.score is not None else ""
        rows.append([truncate(r.title, title_width), r.url, date, score])
    return rows


def with_cost(footer: str, cost: CostInfo | None) -> str:
    if cost is None:
        return footer
    return f"Cost: ${cost.total:.4f} | {footer}"


def register(subparsers) -> None:
    parser = subparsers.add_parser(
        "search",
        help="Search the web using Exa AI",
        description=(
            "Search the web using the Exa AI search API.\n\n"
            "Search types:\n"
            "  auto   - Combines methods with reranker (default)\n"
            "  fast   - <400ms latency, good for real-time\n"
            "  deep   - Query expansion, comprehensive results\n"
            "  neural - Pure embeddings-based semantic search"
        ),
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("query", nargs="+", help="Search query")
    parser.add_argument("-n", "--num-results", type=int, default=25, help="Max results (max 100)")
    parser.add_argument("-t", "--type", dest="search_type", default="auto", choices=SEARCH_TYPES)
    parser.add_argument("--category", default="", help="Category: " + "|".join(CATEGORIES))
    add_domain_filters(parser)
    parser.add_argument("--include-text", default="", help="Text that must appear in results")
    parser.add_argument("--exclude-text", default="", help="Text that must NOT appear in results")
    parser.add_argument("--text", action="store_true", help="Include full text in results")
    parser.add_argument(
        "--text-max-chars", type=int, default=DEFAULT_TEXT_MAX_CHARS, help="Max chars for text content"
    )
    parser.add_argument("--highlights", action="store_true", help="Include LLM-selected highlights")
    parser.add_argument("--summary", action="store_true", help="Include LLM summary")
    parser.add_argument("--no-contents", action="store_true", help="Disable all content retrieval")
    parser.add_argument(
        "--max-age-hours", type=int, default=-1, help="Max cache age (-1=cache, 0=always livecrawl)"
    )
    parser.add_argument("--moderation", action="store_true", help="Enable content safety moderation")
    parser.add_argument("--subpages", type=int, default=0, help="Number of subpages to crawl per result")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CommandContext) -> None:
    request = build_search_request(
        " ".join(args.query),
        num_results=args.num_results,
        search_type=args.search_type,
        category=args.category,
        include_domains=args.include_domains,
        exclude_domains=args.exclude_domains,
        start_date=args.start_date,
        end_date=args.end_date,
        include_text=args.include_text,
        exclude_text=args.exclude_text,
        text=args.text,
        text_max_chars=args.text_max_chars,
        highlights=args.highlights,
        summary=args.summary,
        no_contents=args.no_contents,
        max_age_hours=args.max_age_hours,
        moderation=args.moderation,
        subpages=args.subpages,
    )
    response = ctx.client.search(request)

    if ctx.options.mode is OutputMode.JSON:
        render_json(to_output(response), ctx.options)
        return

    footer = f"{len(response.results)} results | Type: {args.search_type}"
    table = TableData(
        headers=RESULT_HEADERS,
        rows=result_rows(response.results),
        footer=with_cost(footer, response.cost_dollars),
    )
    render_table(table, to_output(response), ctx.options)
