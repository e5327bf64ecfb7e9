"""grass-bot: Slack slash commands backed by the GitHub API.

WHY: Teams want to look up a colleague's GitHub profile or share their
contribution graph without leaving Slack. Slack slash commands post a
form to a webhook; this package is that webhook.

HOW: Three layers: outbound clients (GitHub, chart service, Slack Web
API), an image converter that rasterizes the chart, and a FastAPI server
whose handlers glue them together per command.

RULES:
- /status replies inline with a profile summary
- /grass uploads a PNG of the contribution chart to the channel
- All per-request state is transient; nothing is persisted
"""

__version__ = "0.1.0"
