"""Outbound API clients: GitHub user lookup and the contribution chart service.

WHY: Handlers need profile data and chart images without knowing HTTP
details. This package keeps every non-Slack outbound call behind a small
client class.

HOW: Both clients wrap a synchronous httpx.Client and are used as context
managers, one per request. Responses are decoded into the dataclasses in
models.py.

RULES:
- All GitHub and chart HTTP calls go through these clients
- Every client carries a bounded timeout
"""

from grass_bot.api.chart import ChartClient, ChartFetchError
from grass_bot.api.github import GitHubAPIError, GitHubClient, is_valid_login
from grass_bot.api.models import GitHubUser

__all__ = [
    "ChartClient",
    "ChartFetchError",
    "GitHubAPIError",
    "GitHubClient",
    "GitHubUser",
    "is_valid_login",
]
