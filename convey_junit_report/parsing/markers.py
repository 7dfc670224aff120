"""
Marker profiles used to recognize test outcomes in GoConvey narration.

GoConvey prints Unicode glyphs by default and falls back to single ASCII
characters ("dot" markers) on consoles that cannot render them, e.g. on Windows.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MarkerProfile:
    """Symbol set for one console flavor."""
    name: str
    success: str
    failure: str
    error: str
    skip: str
    special: str  # every marker character; stripped from the end of test names


GLYPH_PROFILE = MarkerProfile(
    name="glyph",
    success="✔",
    failure="✘",
    error="🔥",
    skip="⚠",
    special="✔✘🔥⚠",
)

DOT_PROFILE = MarkerProfile(
    name="dot",
    success=".",
    failure="x",
    error="E",
    skip="S",
    special=".xES",
)


def get_marker_profile(use_dot: bool = False) -> MarkerProfile:
    """Return the ASCII profile when ``use_dot`` is set, the glyph profile otherwise."""
    return DOT_PROFILE if use_dot else GLYPH_PROFILE
