"""Run the development server: ``python -m cabin``."""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "cabin.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=(os.getenv("APP_ENV") or "dev").lower() != "prod",
    )


if __name__ == "__main__":
    main()
