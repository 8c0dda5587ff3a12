"""ASGI entry point: ``uvicorn api:app`` or ``python api.py`` for local runs."""

import uvicorn

from config import ApplicationConfig
from src.api.app import create_app

app = create_app(ApplicationConfig)


def main() -> None:
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=int(ApplicationConfig.API_PORT),
        reload=False,
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
