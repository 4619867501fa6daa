"""Run the dashboard service with uvicorn: ``python -m crm_dashboard``."""

import uvicorn

from crm_dashboard.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "crm_dashboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
