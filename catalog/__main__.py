"""Run the API with uvicorn: python -m catalog (or the catalog-api script)."""

import uvicorn

from catalog.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "catalog.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
