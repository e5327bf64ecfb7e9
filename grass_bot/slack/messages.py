"""Reply text templates for the slash commands.

WHY: Handlers should decide what happened, not how it reads. Keeping
every user-facing string here makes the wording easy to change and easy
to assert on in tests.

HOW: Plain functions returning Slack mrkdwn strings.

RULES:
- Failure replies start with FAILURE_MARKER
- Usage prompts name the command with its leading slash
- A profile with no name shows the login; no bio shows NO_BIO
"""

from __future__ import annotations

from grass_bot.api.models import GitHubUser

FAILURE_MARKER = ":x:"
NO_BIO = "no bio"
INVALID_LOGIN = "not a valid GitHub username"

_EXAMPLE_USERNAME = "octocat"


def usage_prompt(command: str) -> str:
    """Prompt shown when a command arrives with no argument."""
    return ":exclamation: Please enter a GitHub username.\nExample: `/{} {}`".format(
        command, _EXAMPLE_USERNAME
    )


def format_status(user: GitHubUser) -> str:
    """Profile summary for /status."""
    display_name = user.name or user.login
    bio = user.bio or NO_BIO
    return (
        ":bar_chart: *{}* (`{}`)\n"
        "- :card_index_dividers: Public Repos: {}\n"
        "- :busts_in_silhouette: Followers: {}\n"
        "- :receipt: Bio: {}\n"
        "- :link: <{}|View GitHub profile>"
    ).format(
        display_name,
        user.login,
        user.public_repos,
        user.followers,
        bio,
        user.html_url,
    )


def format_failure(username: str, reason: str) -> str:
    return "{} Could not load `{}`.\n> {}".format(FAILURE_MARKER, username, reason)


def chart_caption(username: str) -> str:
    """Channel message that accompanies the uploaded chart."""
    return ":seedling: *{}*'s GitHub contributions".format(username)


def chart_posted(username: str) -> str:
    return ":seedling: *{}*'s contribution chart has been posted.".format(username)


def chart_filename(username: str) -> str:
    return "{}_contributions.png".format(username)
