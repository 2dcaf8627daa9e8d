"""Dither noise sources used when requantizing floating point samples.

Dithering replaces requantization distortion with a constant, low noise
floor. Triangular dithering suits most outputs; Gaussian dithering sounds
more like tape hiss; high-passed dithering moves the noise up in frequency
and is meant only for DACs without noise shaping. S32 and F32 output need
no dithering.
"""

from __future__ import annotations

import abc
import random
from typing import Callable, Optional

from .constants import NUM_CHANNELS

__all__ = [
    "Ditherer",
    "TriangularDitherer",
    "GaussianDitherer",
    "HighPassDitherer",
    "find_ditherer",
]


class Ditherer(abc.ABC):
    """A source of dither noise, measured in least significant bits."""

    NAME: str = ""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    @abc.abstractmethod
    def noise(self) -> float:
        """Return the next noise value."""

    def __str__(self) -> str:
        return self.NAME


class TriangularDitherer(Ditherer):
    """Triangular PDF dither, 2 LSB peak to peak."""

    NAME = "tpdf"

    def noise(self) -> float:
        return self._rng.triangular(-1.0, 1.0, 0.0)


class GaussianDitherer(Ditherer):
    """Gaussian PDF dither, 1/2 LSB RMS."""

    NAME = "gpdf"

    def noise(self) -> float:
        return self._rng.gauss(0.0, 0.5)


class HighPassDitherer(Ditherer):
    """Uniform noise, differenced per channel to push it up in frequency."""

    NAME = "tpdf_hp"

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        super().__init__(rng)
        self._active_channel = 0
        self._previous_noises = [0.0] * NUM_CHANNELS

    def noise(self) -> float:
        new_noise = self._rng.uniform(-0.5, 0.5)
        channel = self._active_channel
        high_passed = new_noise - self._previous_noises[channel]
        self._previous_noises[channel] = new_noise
        self._active_channel ^= 1
        return high_passed


DithererBuilder = Callable[[], Ditherer]

_DITHERERS: dict[str, DithererBuilder] = {
    cls.NAME: cls for cls in (TriangularDitherer, GaussianDitherer, HighPassDitherer)
}


def find_ditherer(name: Optional[str]) -> Optional[DithererBuilder]:
    """Return the ditherer class registered under ``name``, or None."""
    if name is None:
        return None
    return _DITHERERS.get(name)