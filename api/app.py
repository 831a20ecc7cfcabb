"""
CodeVault API entry point.

    python -m api.app          # development server
    gunicorn api.app:app       # production
"""

import logging
import os

from api import create_app

app = create_app()

HOST = os.getenv("API_HOST", "0.0.0.0")
PORT = int(os.getenv("API_PORT", 5000))
DEBUG = os.getenv("API_DEBUG", "false").lower() == "true"


if __name__ == "__main__":
    logging.getLogger(__name__).info(
        "CodeVault API listening on %s:%s (debug=%s)", HOST, PORT, DEBUG
    )
    app.run(host=HOST, port=PORT, debug=DEBUG, threaded=True)
