"""Run the inventory API with uvicorn.

Usage:
    python main.py
    APP_ENV=dev python main.py   # in-memory store, no Cosmos DB needed
"""

import uvicorn

from inventory.api import create_app
from inventory.config import get_config

config = get_config()
app = create_app(config)


if __name__ == "__main__":
    uvicorn.run(app, host=config.server.host, port=config.server.port)
