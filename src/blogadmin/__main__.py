"""Blog admin entrypoint.

Run with:
  python -m blogadmin
"""

import uvicorn

from blogadmin.config import Settings


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run(
        "blogadmin.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
