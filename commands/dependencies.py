"""Shared per-invocation state handed to every command handler."""

import argparse
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from api.exa_client import ExaClient
from config.config import Config
from config.credentials import get_api_key
from utils.logger import get_logger
from utils.output import OutputMode, OutputOptions

ClientFactory = Callable[["CommandContext"], ExaClient]


def get_output_options(args: argparse.Namespace) -> OutputOptions:
    """Build OutputOptions from the global flags."""
    if getattr(args, "json", False):
        mode = OutputMode.JSON
    elif getattr(args, "plaintext", False):
        mode = OutputMode.PLAINTEXT
    else:
        mode = OutputMode.TABLE
    return OutputOptions(
        mode=mode,
        no_color=getattr(args, "no_color", False),
        debug=getattr(args, "debug", False),
        fields=getattr(args, "fields", "") or "",
        jq=getattr(args, "jq", "") or "",
    )


def default_client_factory(ctx: "CommandContext") -> ExaClient:
    api_key = get_api_key(ctx.config)
    ctx.debug(f"Using {ctx.config.get_service_info()}")
    return ExaClient(
        api_key,
        ctx.config.base_url,
        logger=ctx.logger if ctx.options.debug else None,
    )


@dataclass
class CommandContext:
    options: OutputOptions
    config: Config = field(default_factory=Config)
    logger: logging.Logger = field(default_factory=lambda: get_logger("cli"))
    client_factory: ClientFactory = default_client_factory
    _client: ExaClient | None = None

    @property
    def client(self) -> ExaClient:
        """Authenticated client, created on first use."""
        if self._client is None:
            self._client = self.client_factory(self)
        return self._client

    def debug(self, message: str) -> None:
        if self.options.debug:
            self.logger.debug(message)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
