"""
CLI subcommands. Each module exposes ``register(subparsers)``, which adds its
parser and binds ``run(args, ctx)`` as the handler.
"""

from . import answer, auth, contents, context, search, similar, usage

COMMANDS = (search, contents, similar, answer, context, usage, auth)

__all__ = ["COMMANDS"]
