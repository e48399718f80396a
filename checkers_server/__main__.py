import uvicorn

from checkers_server.config import Settings
from checkers_server.main import configure_logging, create_app


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
