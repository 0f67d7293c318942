"""
Run the API with uvicorn: ``python -m portfolio_api``.
"""

import os

import uvicorn

from portfolio_api.core.config import settings


def main() -> None:
    uvicorn.run(
        "portfolio_api.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
