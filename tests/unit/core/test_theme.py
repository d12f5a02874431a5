"""Unit tests for console colour loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from rich.theme import Theme
from torbootstrap.core.theme import StageColors, build_theme, get_theme, load_theme


class TestStageColors:
    """Tests for the StageColors model."""

    def test_accepts_short_and_long_hex(self) -> None:
        """#RGB and #RRGGBB are both valid."""
        colors = StageColors(changed="#AABBCC", muted=" #abc ")

        assert colors.changed == "#AABBCC"
        assert colors.muted == "#abc"

    @pytest.mark.parametrize("value", ["ffffff", "#ff", "#gggggg", "green"])
    def test_rejects_invalid_colors(self, value: str) -> None:
        """Anything but a hex colour is rejected."""
        with pytest.raises(ValidationError):
            StageColors(step=value)

    def test_rejects_unknown_names(self) -> None:
        """Unknown colour names are rejected."""
        with pytest.raises(ValidationError):
            StageColors(sparkle="#ffffff")  # type: ignore[call-arg]


class TestLoadTheme:
    """Tests for load_theme."""

    def test_bundled_colors(self, tmp_path: Path) -> None:
        """Without an override the bundled colours are used."""
        colors = load_theme(tmp_path / "absent.toml")

        assert colors == StageColors()

    def test_override_replaces_single_colors(self, tmp_path: Path) -> None:
        """An override changes only the colours it names."""
        override = tmp_path / "theme.toml"
        override.write_text('[colors]\nstep = "#ff0000"\n')

        colors = load_theme(override)

        assert colors.step == "#ff0000"
        assert colors.success == StageColors().success

    def test_invalid_override_is_ignored(self, tmp_path: Path) -> None:
        """An override with a bad colour falls back to the bundled colours."""
        override = tmp_path / "theme.toml"
        override.write_text('[colors]\nstep = "green"\nerror = "#000000"\n')

        assert load_theme(override) == StageColors()

    def test_malformed_override_is_ignored(self, tmp_path: Path) -> None:
        """An override that is not valid TOML is ignored."""
        override = tmp_path / "theme.toml"
        override.write_text("not valid [ toml")

        assert load_theme(override) == StageColors()


class TestBuildTheme:
    """Tests for Rich theme generation."""

    def test_defines_markup_styles(self) -> None:
        """Every style used in console markup is defined."""
        theme = build_theme(StageColors())

        for name in ("step", "changed", "unchanged", "muted", "bold_header", "border", "error"):
            assert name in theme.styles

    def test_get_theme_is_shared(self) -> None:
        """The theme is loaded once and reused."""
        theme = get_theme()

        assert isinstance(theme, Theme)
        assert get_theme() is theme
