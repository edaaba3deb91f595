"""Severity colour scale for incident markers and chart slices."""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, Tuple

import numpy as np
from plotly import colors as plotly_colors

from .records import IncidentRecord
from .utils.exceptions import EmptyDomainError, InvalidRangeError

logger = logging.getLogger(__name__)

LOW_COLOR = '#ffeda0'
HIGH_COLOR = '#f03b20'

_HEX_COLOR = re.compile(r'^#?[0-9a-fA-F]{6}$')


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    """Parse ``#rrggbb`` with plotly; anything else raises ValueError."""
    value = color.strip()
    if not _HEX_COLOR.match(value):
        raise ValueError(f'Not a hex colour: {color!r}')
    return plotly_colors.hex_to_rgb(value if value.startswith('#') else f'#{value}')


def rgb_to_hex(rgb: Iterable[float]) -> str:
    return '#' + ''.join(f'{int(c):02x}' for c in rgb)


class ColorScale:
    """Linear map from a severity domain to a two-colour RGB range.

    Built once from the full incident set and passed to whoever needs it.
    Inputs outside the domain clamp to the nearest endpoint colour, so
    ``map`` never raises.

    Attributes:
    domain (tuple): (min_severity, max_severity) observed at build time
    color_range (tuple): (low_color, high_color) as hex strings
    """

    def __init__(self, domain: Tuple[float, float], color_range: Tuple[str, str] = (LOW_COLOR, HIGH_COLOR)) -> None:
        low, high = float(domain[0]), float(domain[1])
        if low > high:
            raise InvalidRangeError(f'Colour scale domain minimum {low} is above maximum {high}')
        self.domain = (low, high)
        self.color_range = (color_range[0], color_range[1])
        self._low_rgb = hex_to_rgb(color_range[0])
        self._high_rgb = hex_to_rgb(color_range[1])

    @classmethod
    def build(
        cls,
        records: Iterable[IncidentRecord],
        low_color: str = LOW_COLOR,
        high_color: str = HIGH_COLOR,
    ) -> 'ColorScale':
        """
        Build the scale over the severities of ``records``

        Args:
        records (Iterable[IncidentRecord]): The full, unfiltered incident set
        low_color (str): Colour for the minimum severity
        high_color (str): Colour for the maximum severity

        Returns:
        ColorScale: Scale with domain [min(severity), max(severity)]

        Raises:
        EmptyDomainError: No record carries a finite severity
        """
        severities = np.array([r.severity for r in records], dtype=float)
        finite = severities[np.isfinite(severities)]
        if finite.size == 0:
            raise EmptyDomainError('Cannot build a colour scale without incident severities')
        domain = (float(finite.min()), float(finite.max()))
        logger.debug(f'Colour scale domain {domain} over {finite.size} incidents')
        return cls(domain, (low_color, high_color))

    def position(self, severity: float) -> float:
        """Clamped position of ``severity`` in the domain, 0.0 (low) to 1.0 (high)."""
        try:
            value = float(severity)
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(value):
            return 0.0
        low, high = self.domain
        if high == low:
            # zero-width domain sits at the middle of the range
            return 0.5
        return float(np.clip((value - low) / (high - low), 0.0, 1.0))

    def map(self, severity: float) -> str:
        t = self.position(severity)
        rgb = plotly_colors.find_intermediate_color(self._low_rgb, self._high_rgb, t, colortype='tuple')
        # round half up
        return rgb_to_hex(math.floor(c + 0.5) for c in rgb)

    __call__ = map

    def __repr__(self) -> str:
        return f'ColorScale(domain={self.domain}, color_range={self.color_range})'


__all__ = ['ColorScale', 'LOW_COLOR', 'HIGH_COLOR', 'hex_to_rgb', 'rgb_to_hex']
