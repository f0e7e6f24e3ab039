import os

from dotenv import find_dotenv, load_dotenv

from api.exa_client import DEFAULT_BASE_URL

API_KEY_ENV = "EXA_API_KEY"
BASE_URL_ENV = "EXA_API_URL"


class Config:
    """Configuration management for the CLI."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # A .env next to where the command runs; real environment variables win
        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(dotenv_path=env_path, override=False)

        # API Configuration
        self.EXA_API_KEY = os.getenv(API_KEY_ENV) or None
        self.EXA_API_URL = os.getenv(BASE_URL_ENV) or DEFAULT_BASE_URL

    @property
    def base_url(self) -> str:
        return self.EXA_API_URL.rstrip("/")

    def get_service_info(self) -> str:
        """
        Describe the configured endpoint and credential source.

        Returns:
            str: e.g. "https://api.exa.ai (key from EXA_API_KEY)"
        """
        source = f"key from {API_KEY_ENV}" if self.EXA_API_KEY else "key from config file"
        return f"{self.base_url} ({source})"
