"""Run the chat front-end with uvicorn: ``python -m chatfront``."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "chatfront.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3100")),
        reload=os.environ.get("DEV_RELOAD", "false").lower() == "true",
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
