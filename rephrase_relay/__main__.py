"""Package entry point for ``python -m rephrase_relay``.

Starts the HTTP server with uvicorn on HOST:PORT from the environment.
"""

from rephrase_relay.server.app import run_api

if __name__ == "__main__":
    run_api()
