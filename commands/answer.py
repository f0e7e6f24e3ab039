"""answer: LLM-generated answer with citations, optionally streamed."""

import argparse
import json
import sys

from commands.dependencies import CommandContext
from models.requests import build_answer_request
from models.responses import AnswerResponse, to_output
from utils.output import OutputMode, render_json


def register(subparsers) -> None:
    parser = subparsers.add_parser(
        "answer",
        help="Get an AI-powered answer with citations",
        description=(
            "Get an LLM-generated answer to your question, grounded in Exa "
            "search results, with cited sources."
        ),
        epilog=(
            "Examples:\n"
            '  exa answer "What is the capital of France?"\n'
            '  exa answer "How does photosynthesis work?" --text\n'
            '  exa answer "Explain quantum computing" --stream\n'
            '  exa answer "List top 5 programming languages" --json'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("query", nargs="+", help="Question to answer")
    parser.add_argument("--stream", action="store_true", help="Stream the answer")
    parser.add_argument("--text", action="store_true", help="Include full text in citations")
    parser.add_argument("--model", default="", help="Answer model override")
    parser.add_argument("--output-schema", default="", help="JSON schema file for structured output")
    parser.set_defaults(handler=run)


def format_answer(answer) -> str:
    if isinstance(answer, str):
        return answer
    return json.dumps(answer, indent=2, ensure_ascii=False)


def print_sources(response: AnswerResponse) -> None:
    if not response.citations:
        return
    print("\nSources:")
    for i, citation in enumerate(response.citations, start=1):
        print(f"  {i}. {citation.title or ''} — {citation.url}")


def print_cost(response: AnswerResponse) -> None:
    if response.cost_dollars is not None:
        print(f"\nCost: ${response.cost_dollars.total:.4f}")


def _write_delta(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def run(args: argparse.Namespace, ctx: CommandContext) -> None:
    request = build_answer_request(
        " ".join(args.query),
        text=args.text,
        model=args.model,
        output_schema_path=args.output_schema or None,
    )

    if args.stream and ctx.options.mode is not OutputMode.JSON:
        final: list[AnswerResponse] = []
        ctx.client.answer_stream(request, on_text=_write_delta, on_done=final.append)
        print()

        if final:
            print_sources(final[-1])
            if final[-1].citations:
                print_cost(final[-1])
        return

    response = ctx.client.answer(request)

    if ctx.options.mode is OutputMode.JSON:
        render_json(to_output(response), ctx.options)
        return

    print(format_answer(response.answer))
    print_sources(response)
    print_cost(response)
