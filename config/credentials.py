"""
Local credential storage.

Resolution order: EXA_API_KEY environment variable, then ~/.exa-auth.json.
The file is written with mode 0600.
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from api.errors import AuthRequiredError
from config.config import API_KEY_ENV, Config
from utils.logger import get_logger

logger = get_logger(__name__)

AUTH_FILE_NAME = ".exa-auth.json"


@dataclass
class AuthConfig:
    api_key: str = ""


def config_path() -> Path:
    return Path.home() / AUTH_FILE_NAME


def load_auth(path: Path | None = None) -> AuthConfig | None:
    """Read the auth file; None when it is missing or unreadable."""
    path = path or config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable auth file {path}: {e}")
        return None
    if not isinstance(data, dict):
        return None
    return AuthConfig(api_key=str(data.get("api_key") or ""))


def save_auth(auth: AuthConfig, path: Path | None = None) -> Path:
    path = path or config_path()
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        json.dump(asdict(auth), fh, indent=2)
    os.chmod(path, 0o600)
    return path


def get_api_key(config: Config | None = None, path: Path | None = None) -> str:
    """
    Resolve the API key.

    Raises:
        AuthRequiredError: neither the environment nor the auth file has a key
    """
    config = config or Config()
    if config.EXA_API_KEY:
        return config.EXA_API_KEY

    auth = load_auth(path)
    if auth is None:
        raise AuthRequiredError(
            f"{API_KEY_ENV} not set and no config file found.\n"
            f"Run 'exa auth' to configure or set {API_KEY_ENV} environment variable"
        )
    if not auth.api_key:
        raise AuthRequiredError(f"no valid authentication found (set {API_KEY_ENV} or run 'exa auth')")
    return auth.api_key
