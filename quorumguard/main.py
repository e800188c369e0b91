"""Command-line entry point for the disruption controller."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from contextlib import suppress

from quorumguard.constants.values import APP_TITLE, CONTROLLER_NAME
from quorumguard.controllers.disruption.controller import ClusterDisruptionController
from quorumguard.models.state.app_settings import OperatorSettings
from quorumguard.models.state.config_manager import ConfigLoadError, ConfigManager

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_TITLE,
        description="Keep the Rook/Ceph monitor PodDisruptionBudget consistent with the monitor count.",
    )
    parser.add_argument("--config", help="Path to a YAML settings file")
    parser.add_argument("-n", "--namespace", help="Watch a single namespace instead of all")
    parser.add_argument("--context", help="kubectl context to use")
    parser.add_argument("--workers", type=int, help="Number of reconcile workers")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def apply_overrides(settings: OperatorSettings, args: argparse.Namespace) -> OperatorSettings:
    """Return ``settings`` with command-line values taking precedence."""
    overrides = {
        "namespace": args.namespace,
        "context": args.context,
        "worker_count": args.workers,
    }
    data = settings.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    return OperatorSettings.model_validate(data)


async def run_controller(settings: OperatorSettings) -> int:
    controller = ClusterDisruptionController.from_settings(settings)
    if not await controller.check_connection():
        logger.error("Cannot reach the Kubernetes API server, exiting")
        return 1

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)

    logger.info(
        "Starting %s (namespace=%s)", CONTROLLER_NAME, settings.namespace or "all"
    )
    await controller.run(stop_event)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=_LOG_FORMAT,
    )
    try:
        settings = apply_overrides(ConfigManager.load(args.config), args)
    except (ConfigLoadError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    return asyncio.run(run_controller(settings))
