"""Banner colour assignment for one journal composition run.

A :class:`ColorRegistry` hands out one RGB colour per category and never the
same colour twice. It lives for a single composition run; colours are not
persisted between runs.
"""

from __future__ import annotations

import colorsys
import logging
import random

from src.config import JOURNAL_COLOR_STRATEGY, JOURNAL_MAX_RANDOM_COLOR_ATTEMPTS
from src.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]

GOLDEN_ANGLE_DEGREES = 137.50776405003785
HUE_STEPS_PER_BAND = 360
LIGHTNESS_BANDS = (0.32, 0.40, 0.26, 0.46)
GOLDEN_SATURATION = 0.65
# keeps white banner text readable on random draws
RANDOM_CHANNEL_MAX = 200
STRATEGIES = ("random", "golden")


def to_hex(color: Color) -> str:
    """Format an RGB triple as ``#rrggbb``.

    >>> to_hex((255, 0, 16))
    '#ff0010'
    """
    return "#{:02x}{:02x}{:02x}".format(*color)


def golden_angle_color(step: int) -> Color:
    """Return the colour at ``step`` of the golden-angle hue sequence.

    Each band of 360 steps uses a different lightness, so the sequence keeps
    producing new colours after the hue circle is covered.
    """
    hue = (step * GOLDEN_ANGLE_DEGREES % 360.0) / 360.0
    band = (step // HUE_STEPS_PER_BAND) % len(LIGHTNESS_BANDS)
    red, green, blue = colorsys.hls_to_rgb(hue, LIGHTNESS_BANDS[band], GOLDEN_SATURATION)
    return (round(red * 255), round(green * 255), round(blue * 255))


class ColorRegistry:
    """Registry of colours already assigned in one composition run.

    Parameters
    ----------
    rng : random.Random or None, optional
        Source of randomness; pass a seeded instance for reproducible output.
    strategy : str, optional
        ``"random"`` draws uniform RGB triples and falls back to golden-angle
        stepping after ``max_random_attempts`` collisions in a row;
        ``"golden"`` always steps hues by the golden angle.
    max_random_attempts : int, optional
        Collisions tolerated before switching to golden-angle stepping.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        strategy: str = JOURNAL_COLOR_STRATEGY,
        max_random_attempts: int = JOURNAL_MAX_RANDOM_COLOR_ATTEMPTS,
    ) -> None:
        if strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown colour strategy {strategy!r}; expected one of {STRATEGIES}"
            )
        self.rng = rng or random.Random()
        self.strategy = strategy
        self.max_random_attempts = max_random_attempts
        self.used: set[Color] = set()
        self._by_category: dict[str, Color] = {}
        self._golden_step = 0

    def __len__(self) -> int:
        return len(self.used)

    def __contains__(self, color: object) -> bool:
        return color in self.used

    def _random_color(self) -> Color:
        return (
            self.rng.randint(0, RANDOM_CHANNEL_MAX),
            self.rng.randint(0, RANDOM_CHANNEL_MAX),
            self.rng.randint(0, RANDOM_CHANNEL_MAX),
        )

    def assign_unique(self) -> Color:
        """Draw, register and return a colour not used before in this run.

        Raises
        ------
        ConfigurationError
            If the golden-angle sequence is exhausted as well.
        """
        if self.strategy == "random":
            for _ in range(self.max_random_attempts):
                candidate = self._random_color()
                if candidate not in self.used:
                    self.used.add(candidate)
                    return candidate
            logger.debug(
                "Random colour draws collided %d times, stepping hues",
                self.max_random_attempts,
            )
        limit = HUE_STEPS_PER_BAND * len(LIGHTNESS_BANDS)
        while self._golden_step < limit:
            candidate = golden_angle_color(self._golden_step)
            self._golden_step += 1
            if candidate not in self.used:
                self.used.add(candidate)
                return candidate
        raise ConfigurationError(
            f"No unused banner colour left after {len(self.used)} assignments"
        )

    def color_for(self, category: str) -> Color:
        """Return the category's colour, assigning one on first use."""
        if category not in self._by_category:
            self._by_category[category] = self.assign_unique()
        return self._by_category[category]
