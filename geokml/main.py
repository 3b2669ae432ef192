import uvicorn

from geokml.api.app import build_app
from geokml.config.settings import Settings
from geokml.database.connection import close_pool, init_pool
from geokml.database.schema import ensure_schema
from geokml.logging.logger import Log


def main() -> None:
    """Entry point: initialize pool -> provision schema -> serve API + worker."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        ensure_schema()
        app = build_app(settings)
        uvicorn.run(
            app,
            host=settings.api_host,
            port=settings.api_port,
            log_level=settings.log_level.lower(),
        )
    finally:
        close_pool()


if __name__ == "__main__":
    main()
