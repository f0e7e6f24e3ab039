import argparse
import sys

from api.errors import ExaCLIError, ValidationError
from api.exa_client import __version__
from commands import COMMANDS
from commands.dependencies import ClientFactory, CommandContext, default_client_factory, get_output_options
from utils.logger import LoggerConfig, get_logger
from utils.output import OutputMode, OutputOptions, render_error

logger = get_logger(__name__)

DESCRIPTION = """exa is a command-line interface for the Exa AI search API.

Search the web, find similar pages, get AI-powered answers,
retrieve page contents, and explore code context.

Authentication:
  Set EXA_API_KEY environment variable or run 'exa auth'."""

EXAMPLES = """Examples:
  exa search "hottest AI startups"
  exa search "climate change research" --type deep -n 5
  exa answer "What is the capital of France?"
  exa similar "https://arxiv.org/abs/2307.06435"
  exa contents https://example.com
  exa context "React hooks state management\""""


class CLIArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ValidationError instead of exiting on bad input."""

    def error(self, message):
        raise ValidationError(f"{self.prog}: {message}")


def add_global_flags(parser: argparse.ArgumentParser, default=None) -> None:
    """
    Add the output flags. Subcommands get them with SUPPRESS defaults so a
    flag given before the subcommand is not reset by the subparser.
    """

    def pick(value):
        return value if default is None else default

    output = parser.add_mutually_exclusive_group()
    output.add_argument("-j", "--json", action="store_true", default=pick(False), help="JSON output")
    output.add_argument(
        "-p", "--plaintext", action="store_true", default=pick(False),
        help="Tab-separated output for piping",
    )
    parser.add_argument(
        "--no-color", action="store_true", default=pick(False), help="Disable colored output"
    )
    parser.add_argument(
        "--debug", action="store_true", default=pick(False), help="Verbose logging to stderr"
    )
    parser.add_argument(
        "--fields", default=pick(""), help="Comma-separated fields for JSON output"
    )
    parser.add_argument("--jq", default=pick(""), help="JQ expression to filter JSON output")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with global flags and every subcommand."""
    parser = CLIArgumentParser(
        prog="exa",
        description=DESCRIPTION,
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"exa version {__version__}")
    add_global_flags(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True
    for command in COMMANDS:
        command.register(subparsers)
    for subparser in subparsers.choices.values():
        add_global_flags(subparser, default=argparse.SUPPRESS)
    return parser


def _usage_error(parser: argparse.ArgumentParser, error: ValidationError, argv: list[str]) -> int:
    """Report a command-line parsing error; JSON mode is taken from the raw flags."""
    json_mode = "--json" in argv or "-j" in argv
    options = OutputOptions(mode=OutputMode.JSON if json_mode else OutputMode.TABLE)
    if not json_mode:
        parser.print_usage(sys.stderr)
    render_error(error, options)
    return 1


def main(argv: list[str] | None = None, client_factory: ClientFactory | None = None) -> int:
    """
    Run one CLI invocation.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        client_factory: Override for building the API client (used by tests)

    Returns:
        Process exit code: 0 on success, 1 on any reported error, 130 on Ctrl-C
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except ValidationError as e:
        return _usage_error(parser, e, sys.argv[1:] if argv is None else argv)

    options = get_output_options(args)
    LoggerConfig.setup_logging(debug=options.debug)

    ctx = CommandContext(options=options, client_factory=client_factory or default_client_factory)
    try:
        args.handler(args, ctx)
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130
    except ExaCLIError as e:
        render_error(e, options)
        return 1
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        render_error(e, options)
        return 1
    finally:
        ctx.close()
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
