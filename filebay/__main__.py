"""Run the Filebay API server."""

import uvicorn

from filebay.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "filebay.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
    )


if __name__ == "__main__":
    main()
