"""ASGI entrypoint.

    uvicorn roombook.api.app:app
or
    roombook-api   (reads HOST / PORT)
"""

import os

import uvicorn

from roombook.observability.logging import configure_logging

from .factory import create_app

configure_logging()

app = create_app()


def main() -> None:
    uvicorn.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8080")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
