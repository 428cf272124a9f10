"""Run the API server: ``python -m src.api``."""

import uvicorn

from src.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("src.api.app:app", host=settings.app_host, port=settings.app_port)
