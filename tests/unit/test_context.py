"""Tests for CLI context and settings."""

import pytest

from ini_lint.cli.context import (
    DEFAULT_MAX_BYTES,
    CliContext,
    ExitCode,
    get_exit_code,
    resolve_max_bytes,
)
from ini_lint.core.rules.models import Severity


class TestResolveMaxBytes:
    """Tests for the input size limit."""

    @pytest.fixture(autouse=True)
    def no_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("INI_LINT_MAX_BYTES", raising=False)

    def test_default(self) -> None:
        assert resolve_max_bytes(None) == DEFAULT_MAX_BYTES == 100 * 1024 * 1024

    def test_flag(self) -> None:
        assert resolve_max_bytes(512) == 512

    def test_zero_or_negative_is_unlimited(self) -> None:
        assert resolve_max_bytes(0) is None
        assert resolve_max_bytes(-1) is None

    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INI_LINT_MAX_BYTES", "2048")
        assert resolve_max_bytes(None) == 2048
        assert resolve_max_bytes(10) == 10

    def test_env_unlimited(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INI_LINT_MAX_BYTES", "0")
        assert resolve_max_bytes(None) is None

    def test_env_not_a_number(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INI_LINT_MAX_BYTES", "big")
        with pytest.raises(ValueError, match="INI_LINT_MAX_BYTES"):
            resolve_max_bytes(None)


class TestExitCode:
    """Tests for exit code selection."""

    def test_no_findings(self) -> None:
        assert get_exit_code([], "error") == ExitCode.SUCCESS

    def test_fatal_wins(self) -> None:
        assert get_exit_code([Severity.HINT, Severity.FATAL], "hint") == ExitCode.FATAL

    @pytest.mark.parametrize(
        ("severities", "fail_on", "expected"),
        [
            ([Severity.ERROR], "error", ExitCode.ERROR),
            ([Severity.WARN], "error", ExitCode.SUCCESS),
            ([Severity.WARN], "warn", ExitCode.ERROR),
            ([Severity.HINT], "info", ExitCode.SUCCESS),
            ([Severity.ERROR], "fatal", ExitCode.SUCCESS),
            ([Severity.ERROR], "bogus", ExitCode.ERROR),
        ],
    )
    def test_fail_levels(
        self, severities: list[Severity], fail_on: str, expected: ExitCode
    ) -> None:
        assert get_exit_code(severities, fail_on) == expected


class TestCliContext:
    """Tests for CliContext."""

    def test_defaults(self) -> None:
        ctx = CliContext()
        assert ctx.format == "terminal"
        assert ctx.profile == "default"
        assert ctx.max_bytes == DEFAULT_MAX_BYTES

    def test_should_fail_on(self) -> None:
        ctx = CliContext(fail_on="warn")
        assert ctx.should_fail_on(Severity.ERROR)
        assert ctx.should_fail_on("WARN")
        assert not ctx.should_fail_on(Severity.INFO)

    def test_verbosity_is_not_a_context_setting(self) -> None:
        """Test --verbose is handled by logging setup, not stored on the context."""
        assert "verbose" not in CliContext.model_fields
