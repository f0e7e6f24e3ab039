"""auth: store an API key in the local config file."""

import argparse
import getpass
import os
import sys

from api.errors import ValidationError
from commands.dependencies import CommandContext
from config.config import API_KEY_ENV
from config.credentials import AuthConfig, config_path, load_auth, save_auth
from utils.output import success


def register(subparsers) -> None:
    parser = subparsers.add_parser(
        "auth",
        help="Configure API key authentication",
        description=(
            "Store your Exa API key in ~/.exa-auth.json (mode 0600).\n"
            f"You can also set the {API_KEY_ENV} environment variable instead.\n\n"
            "Get your API key at: https://dashboard.exa.ai/api-keys"
        ),
        epilog=(
            "Examples:\n"
            "  exa auth                        # Interactive setup\n"
            "  exa auth --api-key xxx          # Non-interactive\n"
            f"  {API_KEY_ENV}=xxx exa search ...  # Use env var instead"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--api-key", default="", help="API key to store (skips the prompt)")
    parser.set_defaults(handler=run)


def describe_current(ctx: CommandContext) -> str | None:
    if ctx.config.EXA_API_KEY:
        return f"Currently authenticated via {API_KEY_ENV} environment variable."
    existing = load_auth()
    if existing and existing.api_key:
        return f"Currently authenticated via config file: {config_path()}"
    return None


def read_key(args: argparse.Namespace) -> str:
    if args.api_key:
        return args.api_key.strip()
    if not sys.stdin.isatty():
        raise ValidationError(
            f"--api-key flag or {API_KEY_ENV} env var required in non-interactive mode"
        )
    try:
        return getpass.getpass("Enter your Exa API key: ").strip()
    except EOFError as e:
        raise ValidationError(f"read input: {e}") from e


def run(args: argparse.Namespace, ctx: CommandContext) -> None:
    current = describe_current(ctx)
    if current and not args.api_key:
        print(current)
        print()

    key = read_key(args)
    if not key:
        raise ValidationError("API key cannot be empty")

    path = save_auth(AuthConfig(api_key=key))
    ctx.debug(f"Wrote {path} with mode {oct(os.stat(path).st_mode & 0o777)}")
    success(f"API key saved to {path}", ctx.options)
