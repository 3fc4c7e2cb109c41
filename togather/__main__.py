"""Run the app with uvicorn: ``python -m togather``."""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "togather.app_factory:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
