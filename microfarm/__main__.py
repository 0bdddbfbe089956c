"""Entry point for ``python -m microfarm``.

``serve`` runs the HTTP API with uvicorn; ``play`` creates a local
session and opens the Pygame client on it.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from microfarm.simulation.config import FarmConfig

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="microfarm",
        description="MicroFarm - isometric farming game",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default: config)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: config)")

    play = sub.add_parser("play", help="Play locally in a Pygame window")
    play.add_argument("--name", default="Farmer", help="Farmer name")
    play.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    play.add_argument(
        "--ticks-per-second",
        type=float,
        default=60.0,
        help="Crop growth ticks per second (default: 60)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args and run the chosen front end."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = FarmConfig.from_yaml(args.config)

    if args.command == "serve":
        import uvicorn

        from microfarm.server.app import create_app

        uvicorn.run(
            create_app(config),
            host=args.host or config.host,
            port=args.port or config.port,
            log_level="debug" if args.verbose else "info",
        )
        return

    from microfarm.simulation.service import FarmService
    from microfarm.ui.pygame_client import PygameRenderer

    service = FarmService(config)
    session_id, _ = service.create_session(
        {
            "name": args.name,
            "bodyType": "average",
            "hairStyle": "short",
            "hairColor": "#8B4513",
            "skinTone": "#FDBB7D",
        },
    )
    renderer = PygameRenderer(
        service=service,
        session_id=session_id,
        ticks_per_second=args.ticks_per_second,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
