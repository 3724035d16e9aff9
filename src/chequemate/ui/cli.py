from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from chequemate.adapters.game_history import GameHistorySource
from chequemate.app import build_reconciliation_service
from chequemate.config import configure_logging, get_reconciliation_config
from chequemate.domain.model import Platform, TimeControl, estimate_match_duration
from chequemate.domain.redirects import build_challenge_url

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_PLATFORM_CHOICES = [platform.value for platform in Platform]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile chequemate match results")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sweep", help="Run one backup sweep over ready matches")

    watch = subparsers.add_parser("watch", help="Run the checkers until interrupted")
    watch.add_argument(
        "--track-ready",
        action="store_true",
        help="Schedule per-match checks for matches that are already ready",
    )

    estimate = subparsers.add_parser("estimate", help="Estimate a game's duration")
    estimate.add_argument("time_control", type=str, help="Time control such as 5+3")

    challenge_url = subparsers.add_parser(
        "challenge-url", help="Print the platform link for a challenge"
    )
    challenge_url.add_argument("--platform", choices=_PLATFORM_CHOICES, required=True)
    challenge_url.add_argument("--opponent", type=str, required=True, help="Opponent handle")
    challenge_url.add_argument("--time-control", type=str, help="Time control such as 5+3")

    check_player = subparsers.add_parser(
        "check-player", help="Check whether a handle exists on a platform"
    )
    check_player.add_argument("--platform", choices=_PLATFORM_CHOICES, required=True)
    check_player.add_argument("handle", type=str)

    return parser.parse_args(list(argv))


def _validate_time_control(value: str | None) -> TimeControl | None:
    if value is None:
        return None
    try:
        return TimeControl.parse(value)
    except ValueError as exc:
        raise ValueError(f"Invalid time control: {value}") from exc


async def _sweep() -> None:
    service = build_reconciliation_service()
    try:
        report = await service.sweep_once()
    finally:
        await service.aclose()
    log.info(
        "Sweep finished: examined=%s, resolved=%s, gave_up=%s, pending=%s, failed=%s",
        report.examined,
        report.resolved,
        report.gave_up,
        report.pending,
        report.failed,
    )


async def _watch(*, track_ready: bool) -> None:
    service = build_reconciliation_service()
    try:
        service.start()
        if track_ready:
            log.info("Tracking %d ready matches", service.track_ready_matches())
        await asyncio.Event().wait()
    finally:
        await service.aclose()


async def _check_player(handle: str, platform: Platform) -> bool | None:
    history = GameHistorySource()
    try:
        return await history.player_exists(handle, platform)
    finally:
        await history.aclose()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        time_control = None
        if parsed_args.command == "challenge-url":
            time_control = _validate_time_control(parsed_args.time_control)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "sweep":
            asyncio.run(_sweep())
        elif parsed_args.command == "watch":
            asyncio.run(_watch(track_ready=parsed_args.track_ready))
        elif parsed_args.command == "estimate":
            default = int(get_reconciliation_config().default_match_duration.total_seconds())
            seconds = estimate_match_duration(parsed_args.time_control, default_seconds=default)
            log.info("Estimated duration for %s: %d seconds", parsed_args.time_control, seconds)
        elif parsed_args.command == "challenge-url":
            url = build_challenge_url(parsed_args.platform, parsed_args.opponent, time_control)
            log.info("Challenge URL: %s", url)
        elif parsed_args.command == "check-player":
            platform = Platform(parsed_args.platform)
            exists = asyncio.run(_check_player(parsed_args.handle, platform))
            if exists is None:
                log.warning("Could not reach %s to check %s", platform, parsed_args.handle)
            else:
                log.info(
                    "%s %s on %s",
                    parsed_args.handle,
                    "exists" if exists else "does not exist",
                    platform,
                )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
