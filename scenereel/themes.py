from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, Field

from .errors import ConfigurationError

STYLE_PREFIX = "--reel-"


class ThemeColors(BaseModel):
    bg_primary: str = "#0f172a"
    bg_secondary: str = "#1e293b"
    bg_tertiary: str = "#334155"
    fg_primary: str = "#f8fafc"
    fg_secondary: str = "#cbd5e1"
    fg_muted: str = "#64748b"
    accent: str = "#3b82f6"
    accent_hover: str = "#60a5fa"
    accent_subtle: str = "rgba(59, 130, 246, 0.15)"
    success: str = "#22c55e"
    warning: str = "#eab308"
    error: str = "#ef4444"


class ThemeTypography(BaseModel):
    font_sans: str = '"Inter", ui-sans-serif, system-ui, sans-serif'
    font_mono: str = '"JetBrains Mono", ui-monospace, monospace'
    text_sm: str = "0.875rem"
    text_base: str = "1rem"
    text_lg: str = "1.25rem"
    text_xl: str = "1.5rem"
    text_2xl: str = "2rem"
    text_3xl: str = "2.5rem"
    text_4xl: str = "3.5rem"
    leading_tight: str = "1.15"
    leading_normal: str = "1.5"
    font_weight_normal: str = "400"
    font_weight_bold: str = "700"


class ThemeSpacing(BaseModel):
    space_2: str = "0.5rem"
    space_4: str = "1rem"
    space_8: str = "2rem"
    space_16: str = "4rem"
    container_padding: str = "4rem"
    radius_md: str = "0.5rem"
    radius_lg: str = "1rem"


class ThemeTiming(BaseModel):
    duration_fast: str = "150ms"
    duration_normal: str = "300ms"
    duration_slow: str = "500ms"
    ease_default: str = "cubic-bezier(0.4, 0, 0.2, 1)"
    ease_spring: str = "cubic-bezier(0.34, 1.56, 0.64, 1)"


class Theme(BaseModel):
    name: str
    colors: ThemeColors = Field(default_factory=ThemeColors)
    typography: ThemeTypography = Field(default_factory=ThemeTypography)
    spacing: ThemeSpacing = Field(default_factory=ThemeSpacing)
    timing: ThemeTiming = Field(default_factory=ThemeTiming)

    def to_style_properties(self) -> List[Tuple[str, str]]:
        """Flatten the theme into ordered ``--reel-*`` custom property pairs."""
        props: List[Tuple[str, str]] = []
        for group in (self.colors, self.typography, self.spacing, self.timing):
            for key, value in group.model_dump().items():
                props.append((STYLE_PREFIX + key.replace("_", "-"), value))
        return props


def dark_theme() -> Theme:
    return Theme(name="reel-dark")


def light_theme() -> Theme:
    return Theme(
        name="reel-light",
        colors=ThemeColors(
            bg_primary="#ffffff",
            bg_secondary="#f1f5f9",
            bg_tertiary="#e2e8f0",
            fg_primary="#0f172a",
            fg_secondary="#334155",
            fg_muted="#94a3b8",
            accent="#2563eb",
            accent_hover="#1d4ed8",
            accent_subtle="rgba(37, 99, 235, 0.12)",
        ),
    )


THEMES = {
    "dark": dark_theme,
    "light": light_theme,
}


def get_theme(name: str) -> Theme:
    factory = THEMES.get(name)
    if factory is None:
        raise ConfigurationError(f"Unknown theme: {name}", hint="Available themes: " + ", ".join(THEMES))
    return factory()
