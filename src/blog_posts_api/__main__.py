"""Run the API with uvicorn using the configured host, port and log level."""

import uvicorn

from blog_posts_api.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "blog_posts_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
