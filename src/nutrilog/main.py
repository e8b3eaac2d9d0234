"""Command-line entrypoint that serves the API with uvicorn."""

import uvicorn
from fastapi import FastAPI

from nutrilog.api.app import create_app
from nutrilog.config import Settings
from nutrilog.containers import build_container


def create_asgi_app() -> FastAPI:
    """Build the app from environment settings; used as a uvicorn factory."""
    return create_app(build_container())


def main() -> None:
    """Run the API server on the configured host and port."""
    settings = Settings()
    print(f"Nutrilog listening on http://{settings.host}:{settings.port}")
    uvicorn.run(
        "nutrilog.main:create_asgi_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
