"""Conversion of normalized float samples to output sample formats."""

from __future__ import annotations

import logging
import math
import struct
import sys
from typing import Iterable, Optional

from .dither import Ditherer, DithererBuilder

__all__ = ["Converter"]

log = logging.getLogger(__name__)

_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1
_I16_MIN, _I16_MAX = -(2**15), 2**15 - 1


def _round_half_away(value: float) -> float:
    if not math.isfinite(value):
        return value
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(float(whole), value)


def _saturate(value: float, low: int, high: int) -> int:
    if math.isnan(value):
        return 0
    return int(max(low, min(high, value)))


def _to_f32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class Converter:
    """Turns samples normalized to -1.0..=1.0 into integer or f32 PCM."""

    #: Scale for 32-bit signed output, saturating at the i32 bounds.
    SCALE_S32: float = 2147483648.0
    #: Scale for 24-bit signed output, clamped to the 24-bit bounds.
    SCALE_S24: float = 8388608.0
    #: Scale for 16-bit signed output; matches the reference Vorbis encoder.
    SCALE_S16: float = 32768.0

    def __init__(self, ditherer_builder: Optional[DithererBuilder] = None) -> None:
        self.ditherer: Optional[Ditherer] = None
        if ditherer_builder is not None:
            self.ditherer = ditherer_builder()
            log.info("Converting with ditherer: %s", self.ditherer)

    def scale(self, sample: float, factor: float) -> float:
        """Scale a sample, add dither noise if any, and round to nearest."""
        value = sample * factor
        if self.ditherer is not None:
            value += self.ditherer.noise()
        return _round_half_away(value)

    def clamping_scale(self, sample: float, factor: float) -> float:
        """Scale, then clamp to the two's complement range of ``factor``."""
        value = self.scale(sample, factor)
        return min(max(value, -factor), factor - 1.0)

    def f64_to_f32(self, samples: Iterable[float]) -> list[float]:
        return [_to_f32(sample) for sample in samples]

    def f64_to_s32(self, samples: Iterable[float]) -> list[int]:
        return [
            _saturate(self.scale(sample, self.SCALE_S32), _I32_MIN, _I32_MAX)
            for sample in samples
        ]

    def f64_to_s24(self, samples: Iterable[float]) -> list[int]:
        """24-bit samples packed in the low bits of a 32-bit word."""
        return [
            _saturate(self.clamping_scale(sample, self.SCALE_S24), _I32_MIN, _I32_MAX)
            for sample in samples
        ]

    def f64_to_s24_3(self, samples: Iterable[float]) -> list[bytes]:
        """24-bit samples as 3-byte values in native byte order."""
        return [
            value.to_bytes(3, sys.byteorder, signed=True)
            for value in self.f64_to_s24(samples)
        ]

    def f64_to_s16(self, samples: Iterable[float]) -> list[int]:
        return [
            _saturate(self.scale(sample, self.SCALE_S16), _I16_MIN, _I16_MAX)
            for sample in samples
        ]