"""Package entry point for ``python -m grass_bot``.

Starts the FastAPI server with uvicorn, same as the ``grass-bot``
console script.
"""

from grass_bot.server.app import run_api

if __name__ == "__main__":
    run_api()
