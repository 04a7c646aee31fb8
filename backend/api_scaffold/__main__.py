"""Run the API with uvicorn: ``python -m api_scaffold``."""

import uvicorn

from api_scaffold.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "api_scaffold.main:app", host=settings.host, port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
