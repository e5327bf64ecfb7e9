"""GitHub API response dataclasses.

WHY: The /status command only needs six fields from GitHub's user
object. A typed dataclass makes that subset explicit and gives the
message formatter attribute access instead of dict lookups.

HOW: GitHubUser.from_dict picks the known fields out of the raw JSON and
ignores everything else.

RULES:
- Missing or null fields default to "" (strings) or 0 (counts)
- Decoding never raises on absent fields; GitHub omits or nulls
  name and bio routinely
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GitHubUser:
    """Subset of GET /users/{username} used by the status reply."""

    login: str = ""
    name: str = ""
    public_repos: int = 0
    followers: int = 0
    bio: str = ""
    html_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GitHubUser:
        return cls(
            login=_as_str(data.get("login")),
            name=_as_str(data.get("name")),
            public_repos=_as_int(data.get("public_repos")),
            followers=_as_int(data.get("followers")),
            bio=_as_str(data.get("bio")),
            html_url=_as_str(data.get("html_url")),
        )


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> int:
    # bool is an int subclass; GitHub never sends one for a count
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0
