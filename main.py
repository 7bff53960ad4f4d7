"""Main entry point for the storefront API."""

import uvicorn

from storefront.infrastructure.config import get_settings


def main() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()

    uvicorn.run(
        "storefront.presentation.api:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
