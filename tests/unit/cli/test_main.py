"""Unit tests for the torbootstrap command.

Tests for argument handling, exit statuses and the hand-off to the pipeline.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from torbootstrap import __version__
from torbootstrap.cli.main import app
from torbootstrap.core.errors import PrivilegeError
from torbootstrap.core.settings import Settings
from torbootstrap.models.mode import NodeMode
from torbootstrap.models.result import StageResult, StageStatus
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def pipeline() -> Iterator[MagicMock]:
    """Root host with default settings and a mocked pipeline."""
    with (
        patch("torbootstrap.cli.main.load_settings", return_value=Settings()),
        patch("torbootstrap.cli.main.require_root"),
        patch("torbootstrap.cli.main.invoking_login", return_value="alice"),
        patch("torbootstrap.cli.main.run_pipeline", return_value=[]) as mock_pipeline,
    ):
        yield mock_pipeline


def _context(mock_pipeline: MagicMock):
    mock_pipeline.assert_called_once()
    return mock_pipeline.call_args[0][1]


class TestArguments:
    """Tests for mode selection and usage errors."""

    def test_no_mode_is_usage_error(self, pipeline: MagicMock) -> None:
        """Running without a mode prints usage and exits 255."""
        result = runner.invoke(app, [])

        assert result.exit_code == 255
        assert "Usage:" in result.stdout
        assert "--bridge" in result.stdout
        pipeline.assert_not_called()

    def test_unknown_flag_is_usage_error(self, pipeline: MagicMock) -> None:
        """Unrecognized flags exit 255 before anything runs."""
        result = runner.invoke(app, ["-r", "--bogus"])

        assert result.exit_code == 255
        assert "--bogus" in result.stdout
        pipeline.assert_not_called()

    @pytest.mark.parametrize(
        ("args", "message"),
        [
            (["-r", "--config"], "requires an argument"),
            (["--bridge=yes"], "does not take a value"),
        ],
    )
    def test_malformed_option_is_usage_error(
        self, pipeline: MagicMock, args: list[str], message: str
    ) -> None:
        """Options Click cannot parse print usage on stdout and exit 255."""
        result = runner.invoke(app, args)

        assert result.exit_code == 255
        assert message in result.stdout
        assert "Usage:" in result.stdout
        pipeline.assert_not_called()

    @pytest.mark.parametrize(
        ("args", "mode"),
        [
            (["-b"], NodeMode.BRIDGE),
            (["--relay"], NodeMode.RELAY),
            (["-x"], NodeMode.EXIT),
        ],
    )
    def test_selects_mode(self, pipeline: MagicMock, args: list[str], mode: NodeMode) -> None:
        """Each flag selects its mode."""
        result = runner.invoke(app, args)

        assert result.exit_code == 0
        assert _context(pipeline).mode is mode

    @pytest.mark.parametrize(
        ("args", "mode"),
        [
            (["-b", "-x"], NodeMode.EXIT),
            (["-x", "-b"], NodeMode.BRIDGE),
            (["-r", "-x", "-r"], NodeMode.RELAY),
        ],
    )
    def test_last_mode_wins(self, pipeline: MagicMock, args: list[str], mode: NodeMode) -> None:
        """When several modes are given the last one wins."""
        result = runner.invoke(app, args)

        assert result.exit_code == 0
        assert _context(pipeline).mode is mode

    def test_context_carries_options(self, pipeline: MagicMock) -> None:
        """Dry-run and the login name reach the stages."""
        result = runner.invoke(app, ["-r", "--dry-run"])

        assert result.exit_code == 0
        ctx = _context(pipeline)
        assert ctx.dry_run is True
        assert ctx.login == "alice"

    def test_version(self) -> None:
        """--version prints the version without a mode."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help(self) -> None:
        """--help lists the mode flags."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "--exit" in result.stdout


class TestExitStatus:
    """Tests for exit statuses after preflight and pipeline failures."""

    def test_not_root(self) -> None:
        """Non-root runs exit 1 before any stage."""
        with (
            patch("torbootstrap.cli.main.load_settings", return_value=Settings()),
            patch(
                "torbootstrap.cli.main.require_root",
                side_effect=PrivilegeError("This tool must be run as root"),
            ),
            patch("torbootstrap.cli.main.run_pipeline") as mock_pipeline,
        ):
            result = runner.invoke(app, ["-r"])

        assert result.exit_code == 1
        assert "must be run as root" in result.output
        mock_pipeline.assert_not_called()

    def test_failed_stage_status(self, pipeline: MagicMock) -> None:
        """A failed stage's exit status becomes the process status."""
        pipeline.return_value = [
            StageResult(stage="update", status=StageStatus.CHANGED),
            StageResult(
                stage="install",
                status=StageStatus.FAILED,
                error="Command failed (100): apt-get install",
                exit_code=100,
            ),
        ]

        result = runner.invoke(app, ["-x"])

        assert result.exit_code == 100
        assert "install" in result.stdout

    def test_successful_run(self, pipeline: MagicMock) -> None:
        """A run where every stage succeeds exits 0."""
        pipeline.return_value = [StageResult(stage="tor", status=StageStatus.UNCHANGED)]

        result = runner.invoke(app, ["-b"])

        assert result.exit_code == 0
        assert "All stages completed" in result.stdout


class TestConfiguration:
    """Tests for --config and --print-config."""

    def test_print_config(self, tmp_path: Path) -> None:
        """--print-config dumps the effective settings without a mode."""
        config = tmp_path / "config.toml"
        config.write_text('[packages]\nextra = ["vnstat"]\n')

        result = runner.invoke(app, ["--config", str(config), "--print-config"])

        assert result.exit_code == 0
        assert "[packages]" in result.stdout
        assert '"vnstat"' in result.stdout

    def test_invalid_config_exits_255(self, tmp_path: Path) -> None:
        """A broken configuration file is a usage error."""
        config = tmp_path / "config.toml"
        config.write_text("[paths]\nunknown = 1\n")

        with patch("torbootstrap.cli.main.run_pipeline") as mock_pipeline:
            result = runner.invoke(app, ["-r", "--config", str(config)])

        assert result.exit_code == 255
        mock_pipeline.assert_not_called()

    def test_missing_config_exits_255(self, tmp_path: Path) -> None:
        """A configuration file given explicitly must exist."""
        result = runner.invoke(app, ["-r", "--config", str(tmp_path / "missing.toml")])

        assert result.exit_code == 255
