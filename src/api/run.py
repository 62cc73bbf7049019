"""Command-line launcher: ``rentals-serve <service>``."""
import argparse

import uvicorn

from core.config import Settings, get_settings

# Service name -> attribute of api.main holding its app
APP_NAMES = {
    "auth": "auth_app",
    "users": "user_app",
    "properties": "property_app",
    "gateway": "gateway_app",
}


def default_port(service: str, settings: Settings) -> int:
    return {
        "auth": settings.auth_port,
        "users": settings.user_port,
        "properties": settings.property_port,
        "gateway": settings.gateway_port,
    }[service]


def main(argv: list[str] | None = None) -> None:
    """Run one service with uvicorn on its configured port."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Run one of the rental platform services.")
    parser.add_argument("service", choices=list(APP_NAMES))
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument(
        "--port", type=int, default=None, help="Defaults to the service's port setting",
    )
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args(argv)

    uvicorn.run(
        f"api.main:{APP_NAMES[args.service]}",
        host=args.host,
        port=args.port or default_port(args.service, settings),
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
