"""Runtime settings, endpoint defaults, and .env loading.

WHY: Every collaborator (GitHub client, chart fetcher, converter, Slack
uploader, server) needs a handful of secrets, base URLs, and timeouts.
Reading them once into a single immutable object keeps environment
lookups out of request handling and lets tests build settings by hand.

HOW: python-dotenv loads the .env file on import. load_settings() reads
the environment into a frozen Settings dataclass, which is then passed
explicitly to create_app() and from there to every collaborator.

RULES:
- Settings is frozen; nothing mutates it after startup
- An empty SLACK_VERIFICATION_TOKEN disables the token check (logged)
- Numeric variables that fail to parse raise ValueError naming the variable
- Secrets never appear in log output
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env from the working directory the server is started from
load_dotenv()

# ---------------------------------------------------------------------------
# Endpoint and limit defaults
# ---------------------------------------------------------------------------

GITHUB_API_URL = "https://api.github.com"
CHART_BASE_URL = "https://ghchart.rshah.org"
SLACK_API_URL = "https://slack.com/api"

GITHUB_TIMEOUT_S = 5.0
"""GitHub lookups are interactive and use a short fixed timeout."""

DEFAULT_HTTP_TIMEOUT_S = 10.0
DEFAULT_MAX_CHART_BYTES = 5 * 1024 * 1024

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


@dataclass(frozen=True)
class Settings:
    """Process configuration, built once at startup.

    RULES:
    - verification_token: shared secret Slack attaches to slash commands
    - slack_bot_token: xoxb- token for Web API calls
    - github_token: optional; raises the GitHub rate limit when set
    - http_timeout_s: applies to every outbound call except GitHub
    """

    verification_token: str = ""
    slack_bot_token: str = ""
    github_token: str = ""
    github_api_url: str = GITHUB_API_URL
    chart_base_url: str = CHART_BASE_URL
    slack_api_url: str = SLACK_API_URL
    rsvg_convert_path: str = "rsvg-convert"
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    max_chart_bytes: int = DEFAULT_MAX_CHART_BYTES
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


def _env_number(name: str, default: float, cast: type) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(
            "Invalid value for {}: {!r} is not a valid {}".format(
                name, raw, cast.__name__
            )
        ) from None


def load_settings() -> Settings:
    """Read Settings from the environment (populated by python-dotenv).

    Nothing is validated beyond number parsing; create_app() logs the
    configuration gaps it can tolerate.
    """
    return Settings(
        verification_token=os.getenv("SLACK_VERIFICATION_TOKEN", "").strip(),
        slack_bot_token=os.getenv("SLACK_BOT_TOKEN", "").strip(),
        github_token=os.getenv("GITHUB_TOKEN", "").strip(),
        github_api_url=os.getenv("GITHUB_API_URL", GITHUB_API_URL).rstrip("/"),
        chart_base_url=os.getenv("CHART_BASE_URL", CHART_BASE_URL).rstrip("/"),
        slack_api_url=os.getenv("SLACK_API_URL", SLACK_API_URL).rstrip("/"),
        rsvg_convert_path=os.getenv("RSVG_CONVERT_PATH", "rsvg-convert"),
        http_timeout_s=_env_number("HTTP_TIMEOUT_S", DEFAULT_HTTP_TIMEOUT_S, float),
        max_chart_bytes=int(
            _env_number("MAX_CHART_BYTES", DEFAULT_MAX_CHART_BYTES, int)
        ),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(_env_number("PORT", 8080, int)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
