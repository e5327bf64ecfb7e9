"""HTTP server for the slash command webhooks.

WHY: Slack needs a public HTTPS endpoint per slash command. This package
is that endpoint: FastAPI routes in app.py, command pipelines in
handlers.py, request and reply schemas in models.py.

RULES:
- create_app() is the only way to build the app; tests inject fakes
- Handlers never let domain failures escape as HTTP errors
"""

from grass_bot.server.app import create_app, run_api

__all__ = ["create_app", "run_api"]
