"""context: code-oriented context lookup (Exa Code)."""

import argparse
import sys

from commands.dependencies import CommandContext
from models.requests import build_context_request
from models.responses import to_output
from utils.output import OutputMode, render_json


def register(subparsers) -> None:
    parser = subparsers.add_parser(
        "context",
        help="Get code context from Exa Code",
        description=(
            "Search for code-related context: relevant snippets, documentation "
            "and examples for a programming query."
        ),
        epilog=(
            "Examples:\n"
            '  exa context "React hooks state management"\n'
            '  exa context "Python async await patterns" --tokens 5000'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("query", nargs="+", help="Programming query")
    parser.add_argument("--tokens", type=int, default=0, help="Token limit for response (0=dynamic)")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CommandContext) -> None:
    request = build_context_request(" ".join(args.query), tokens=args.tokens)
    response = ctx.client.get_context(request)

    if ctx.options.mode is OutputMode.JSON:
        render_json(to_output(response), ctx.options)
        return

    print(response.context)

    cost = response.cost
    if cost is not None:
        print(f"\nCost: ${cost.total:.4f}", file=sys.stderr)
