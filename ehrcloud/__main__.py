"""
Run the API with uvicorn.

Usage:
    python -m ehrcloud
    ehrcloud
"""
import uvicorn

from ehrcloud.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "ehrcloud.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development and settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
