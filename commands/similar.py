"""similar: find pages similar to a URL."""

import argparse

from commands.dependencies import CommandContext
from commands.search import RESULT_HEADERS, add_domain_filters, result_rows, with_cost
from models.requests import build_similar_request
from models.responses import to_output
from utils.output import OutputMode, TableData, render_json, render_table


def register(subparsers) -> None:
    parser = subparsers.add_parser(
        "similar",
        help="Find pages similar to a URL",
        description="Find web pages semantically similar to the given URL.",
        epilog=(
            "Examples:\n"
            '  exa similar "https://arxiv.org/abs/2307.06435"\n'
            '  exa similar "https://example.com" -n 20\n'
            '  exa similar "https://blog.example.com" --exclude-source\n'
            '  exa similar "https://example.com" --json'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url", help="Source page URL")
    parser.add_argument("-n", "--num-results", type=int, default=10, help="Max results")
    parser.add_argument(
        "--exclude-source", action="store_true", help="Exclude the source domain from results"
    )
    add_domain_filters(parser, noun="include")
    parser.add_argument("--text", action="store_true", help="Include full text")
    parser.add_argument("--highlights", action="store_true", help="Include highlights")
    parser.add_argument("--category", default="", help="Category filter")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CommandContext) -> None:
    request = build_similar_request(
        args.url,
        num_results=args.num_results,
        exclude_source=args.exclude_source,
        include_domains=args.include_domains,
        exclude_domains=args.exclude_domains,
        start_date=args.start_date,
        end_date=args.end_date,
        text=args.text,
        highlights=args.highlights,
        category=args.category,
    )
    response = ctx.client.find_similar(request)

    if ctx.options.mode is OutputMode.JSON:
        render_json(to_output(response), ctx.options)
        return

    table = TableData(
        headers=RESULT_HEADERS,
        rows=result_rows(response.results),
        footer=with_cost(f"{len(response.results)} similar pages", response.cost_dollars),
    )
    render_table(table, to_output(response), ctx.options)
