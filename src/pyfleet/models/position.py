"""Geographic position value type."""

from __future__ import annotations

from typing import NamedTuple


class Position(NamedTuple):
    """A WGS84 coordinate pair in degrees."""

    lat: float
    lon: float

    def lerp(self, other: Position, t: float) -> Position:
        """Linearly interpolate each coordinate towards *other*.

        ``t = 0`` returns ``self`` and ``t = 1`` returns *other*.
        """
        return Position(
            self.lat + (other.lat - self.lat) * t,
            self.lon + (other.lon - self.lon) * t,
        )
