"""Run the API with uvicorn: ``python -m marketplace``."""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "marketplace.app:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3000")),
    )


if __name__ == "__main__":
    main()
