"""Console entry point: serve the API with uvicorn."""

import uvicorn

from chat_auth.config.settings import get_settings


def main() -> None:
    """Run the web server on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "chat_auth.api.main:app",
        host=settings.web_server_host,
        port=settings.web_server_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
