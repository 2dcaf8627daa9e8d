"""Decibel helpers and ReplayGain style normalisation data."""

from __future__ import annotations

import enum
import logging
import math
import struct
from dataclasses import dataclass
from typing import BinaryIO

from .constants import SAMPLES_PER_SECOND

__all__ = [
    "DB_VOLTAGE_RATIO",
    "PCM_AT_0DBFS",
    "NormalisationType",
    "NormalisationMethod",
    "NormalisationSettings",
    "NormalisationData",
    "db_to_ratio",
    "ratio_to_db",
    "duration_to_coefficient",
    "coefficient_to_duration",
]

log = logging.getLogger(__name__)

DB_VOLTAGE_RATIO: float = 20.0
PCM_AT_0DBFS: float = 1.0

_HEADER_START_OFFSET = 144
_DATA_FORMAT = struct.Struct("<4f")


def db_to_ratio(db: float) -> float:
    """Convert a level in dB to a voltage ratio."""
    return 10.0 ** (db / DB_VOLTAGE_RATIO)


def ratio_to_db(ratio: float) -> float:
    """Convert a voltage ratio to a level in dB."""
    if ratio == 0.0:
        return -math.inf
    return math.log10(ratio) * DB_VOLTAGE_RATIO


def duration_to_coefficient(seconds: float) -> float:
    """Return the per-sample smoothing coefficient for a time constant."""
    return math.exp(-1.0 / (seconds * SAMPLES_PER_SECOND))


def coefficient_to_duration(coefficient: float) -> float:
    """Return the time constant, in seconds, of a smoothing coefficient."""
    return -1.0 / math.log(coefficient) / SAMPLES_PER_SECOND


class NormalisationType(enum.Enum):
    ALBUM = "album"
    TRACK = "track"
    AUTO = "auto"


class NormalisationMethod(enum.Enum):
    BASIC = "basic"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class NormalisationSettings:
    """The player settings that govern normalisation and limiting."""

    normalisation: bool = False
    normalisation_type: NormalisationType = NormalisationType.AUTO
    normalisation_method: NormalisationMethod = NormalisationMethod.DYNAMIC
    normalisation_pregain_db: float = 0.0
    normalisation_threshold_dbfs: float = -2.0
    normalisation_attack_cf: float = duration_to_coefficient(0.005)
    normalisation_release_cf: float = duration_to_coefficient(0.1)
    normalisation_knee_db: float = 5.0


@dataclass(frozen=True)
class NormalisationData:
    """Track and album gain and peak values for one audio file."""

    track_gain_db: float = 0.0
    track_peak: float = 1.0
    album_gain_db: float = 0.0
    album_peak: float = 1.0

    @classmethod
    def parse_from_ogg(cls, stream: BinaryIO) -> "NormalisationData":
        """Read the values stored in the custom header packet of an Ogg file.

        Raises EOFError if the stream ends inside the normalisation data.
        """
        new_position = stream.seek(_HEADER_START_OFFSET)
        if new_position != _HEADER_START_OFFSET:
            log.error(
                "NormalisationData.parse_from_ogg seeking to %d but position is now %s",
                _HEADER_START_OFFSET,
                new_position,
            )
            log.error("Falling back to default (non-track and non-album) normalisation data.")
            return cls()

        buffer = stream.read(_DATA_FORMAT.size)
        if buffer is None or len(buffer) != _DATA_FORMAT.size:
            raise EOFError("stream ended inside normalisation data")

        track_gain_db, track_peak, album_gain_db, album_peak = _DATA_FORMAT.unpack(buffer)
        return cls(
            track_gain_db=track_gain_db,
            track_peak=track_peak,
            album_gain_db=album_gain_db,
            album_peak=album_peak,
        )

    def get_factor(self, settings: NormalisationSettings) -> float:
        """Return the gain factor these values call for under ``settings``."""
        if not settings.normalisation:
            return 1.0

        if settings.normalisation_type is NormalisationType.ALBUM:
            gain_db, gain_peak = self.album_gain_db, self.album_peak
        else:
            gain_db, gain_peak = self.track_gain_db, self.track_peak

        pregain_db = settings.normalisation_pregain_db
        threshold_dbfs = settings.normalisation_threshold_dbfs

        if settings.normalisation_method is NormalisationMethod.BASIC:
            # Clipping prevention: never exceed 1.0 / peak, nor 0 dBFS.
            factor = min(db_to_ratio(gain_db + pregain_db), PCM_AT_0DBFS / gain_peak)
            if factor > PCM_AT_0DBFS:
                log.info(
                    "Lowering gain by %.2f dB for the duration of this track "
                    "to avoid potentially exceeding dBFS.",
                    ratio_to_db(factor),
                )
                factor = PCM_AT_0DBFS
        else:
            # The dynamic limiter takes care of peaks.
            factor = db_to_ratio(gain_db + pregain_db)
            threshold_ratio = db_to_ratio(threshold_dbfs)
            if factor > PCM_AT_0DBFS:
                factor_db = gain_db + pregain_db
                limiting_db = factor_db + abs(threshold_dbfs)
                log.warning(
                    "This track may exceed dBFS by %.2f dB and be subject to "
                    "%.2f dB of dynamic limiting at its peak.",
                    factor_db,
                    limiting_db,
                )
            elif factor > threshold_ratio:
                limiting_db = gain_db + pregain_db + abs(threshold_dbfs)
                log.info(
                    "This track may be subject to %.2f dB of dynamic limiting at its peak.",
                    limiting_db,
                )

        log.debug("Normalisation Data: %r", self)
        log.debug(
            "Calculated Normalisation Factor for %s: %.2f%%",
            settings.normalisation_type,
            factor * 100.0,
        )
        return factor