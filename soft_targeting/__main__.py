"""Entry point: ``python -m soft_targeting``.

Supports two modes:
  - ``python -m soft_targeting``        → Launch FastAPI diagnostics server
  - ``python -m soft_targeting cli``    → Headless sandbox run
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _add_targeting_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--radius", type=float, default=1000.0, help="Search radius")
    parser.add_argument("--interval", type=float, default=0.1, help="Seconds between evaluations")
    parser.add_argument("--camera-h", type=float, default=45.0, help="Camera horizontal half-angle")
    parser.add_argument("--camera-v", type=float, default=30.0, help="Camera vertical half-angle")
    parser.add_argument("--player-h", type=float, default=90.0, help="Player facing half-angle")
    parser.add_argument("--weights", type=float, nargs=3, default=(1.0, 1.0, 1.0),
                        metavar=("CAMERA", "DISTANCE", "PLAYER"))
    parser.add_argument("--tag", type=str, default="Target")
    parser.add_argument("--debug", action="store_true", help="Log missing-reference warnings")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Soft-lock target selection sandbox")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI diagnostics server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--enemies", type=int, default=12)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])
    _add_targeting_args(srv)

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless sandbox session")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--steps", type=int, default=900)
    cli.add_argument("--enemies", type=int, default=12)
    cli.add_argument("--trace", action="store_true", help="Log every evaluation (targeting at DEBUG)")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])
    _add_targeting_args(cli)

    return parser


def _targeting_config(args: argparse.Namespace):
    from soft_targeting.config import TargetingConfig

    camera_w, distance_w, player_w = args.weights
    return TargetingConfig(
        search_radius=args.radius,
        search_interval=args.interval,
        max_horizontal_camera_angle=args.camera_h,
        max_vertical_camera_angle=args.camera_v,
        max_horizontal_player_half_angle=args.player_h,
        camera_direction_weight=camera_w,
        distance_weight=distance_w,
        player_direction_weight=player_w,
        target_tag=args.tag,
        debug=args.debug,
    )


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from soft_targeting.api.app import create_app
    from soft_targeting.config import SandboxConfig

    config = SandboxConfig(
        world_seed=args.seed,
        enemy_count=args.enemies,
        log_level=args.log_level,
    )
    app = create_app(config, _targeting_config(args))
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from soft_targeting.config import SandboxConfig
    from soft_targeting.engine.sandbox_loop import build_sandbox
    from soft_targeting.utils.logging import setup_logging

    config = SandboxConfig(
        world_seed=args.seed,
        enemy_count=args.enemies,
        max_steps=args.steps,
        log_level=args.log_level,
    )
    setup_logging(config.log_level, verbose=("soft_targeting.targeting",) if args.trace else ())

    loop = build_sandbox(config, _targeting_config(args))
    loop.run()

    events = loop.event_log.latest(len(loop.event_log))
    logger.info("%d lock transitions recorded", len(events))
    for event in events:
        logger.info("  step %5d  t=%7.3fs  %-5s %d", event.step, event.time, event.kind.name, event.handle)

    ranked = loop.targeting.get_ranked_targets()
    logger.info("Final target: %s", loop.targeting.get_current_target())
    for rank, sc in enumerate(ranked, start=1):
        actor = loop.world.get_actor(sc.handle)
        name = getattr(actor, "name", "?")
        logger.info("  #%d %-10s handle=%-3d score=%.2f", rank, name, sc.handle, sc.score)


def main() -> None:
    from soft_targeting.core.errors import ConfigurationError

    parser = _build_parser()
    args = parser.parse_args()

    try:
        # Default to serve mode if no subcommand given
        if args.command is None or args.command == "serve":
            if args.command is None:
                args = parser.parse_args(["serve"])
            _run_server(args)
        elif args.command == "cli":
            _run_cli(args)
    except ConfigurationError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
