"""Dev entry point: python -m broadcast_service."""
from broadcast_service.app import create_app
from broadcast_service.bootstrap import build_service
from broadcast_service.config import BroadcastConfig


def main() -> None:
    config = BroadcastConfig()
    app = create_app(
        build_service(config),
        log_level=config.log_level,
        history_page_size=config.history_page_size,
    )
    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
