from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pytest

from chequemate.domain.checking import SweepReport
from chequemate.ui import cli as cli_module


def test_estimate_logs_duration(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="chequemate.ui.cli")

    cli_module.main(["estimate", "5+3"])

    assert "Estimated duration for 5+3: 780 seconds" in caplog.text


def test_estimate_falls_back_to_default(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("CHEQUEMATE_DEFAULT_MATCH_DURATION_SECONDS", "240")
    caplog.set_level(logging.INFO, logger="chequemate.ui.cli")

    cli_module.main(["estimate", "daily"])

    assert "Estimated duration for daily: 240 seconds" in caplog.text


def test_challenge_url(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="chequemate.ui.cli")

    cli_module.main(
        [
            "challenge-url",
            "--platform",
            "lichess.org",
            "--opponent",
            "Hikaru",
            "--time-control",
            "3+2",
        ]
    )

    assert "Challenge URL: https://lichess.org/@/Hikaru?time=3+2" in caplog.text


def test_challenge_url_rejects_bad_time_control() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            [
                "challenge-url",
                "--platform",
                "chess.com",
                "--opponent",
                "Hikaru",
                "--time-control",
                "x",
            ]
        )

    assert excinfo.value.code == 2


def test_unknown_platform_is_rejected() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check-player", "--platform", "chess24", "Hikaru"])

    assert excinfo.value.code == 2


@dataclass
class _FakeService:
    report: SweepReport = field(default_factory=lambda: SweepReport(examined=2, resolved=1))
    closed: bool = False

    async def sweep_once(self) -> SweepReport:
        return self.report

    async def aclose(self) -> None:
        self.closed = True


def test_sweep_command_runs_one_sweep(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    service = _FakeService()
    monkeypatch.setattr(cli_module, "build_reconciliation_service", lambda: service)
    caplog.set_level(logging.INFO, logger="chequemate.ui.cli")

    cli_module.main(["sweep"])

    assert service.closed
    assert "examined=2, resolved=1" in caplog.text


def test_fatal_errors_exit_with_status_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken() -> None:
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(cli_module, "build_reconciliation_service", broken)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sweep"])

    assert excinfo.value.code == 1


def test_check_player(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    checked: list[tuple[str, str]] = []

    async def fake_check(handle: str, platform: str) -> bool:
        checked.append((handle, platform))
        return False

    monkeypatch.setattr(cli_module, "_check_player", fake_check)
    caplog.set_level(logging.INFO, logger="chequemate.ui.cli")

    cli_module.main(["check-player", "--platform", "chess.com", "ghost"])

    assert checked == [("ghost", "chess.com")]
    assert "ghost does not exist on chess.com" in caplog.text
