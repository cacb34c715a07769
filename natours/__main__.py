"""Run the API server with uvicorn."""

import uvicorn

from natours.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "natours.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development and settings.debug,
        proxy_headers=settings.trust_proxy,
        server_header=False,
    )


if __name__ == "__main__":
    main()
