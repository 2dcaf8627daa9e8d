"""Per-sample gain stage: volume, basic normalisation and dynamic limiting."""

from __future__ import annotations

import math
import sys
from typing import MutableSequence

from .gain import (
    NormalisationMethod,
    NormalisationSettings,
    db_to_ratio,
    ratio_to_db,
)

__all__ = ["Normaliser"]


def _is_normal(value: float) -> bool:
    """True for finite, non-zero values that are not subnormal."""
    return math.isfinite(value) and abs(value) >= sys.float_info.min


class Normaliser:
    """Applies normalisation and volume to decoded samples.

    With the dynamic method a feed-forward limiter in the log domain
    (soft knee, smooth decoupled peak detector) shaves off peaks above the
    threshold. Its detector state carries over from one call to the next.
    """

    def __init__(self, settings: NormalisationSettings) -> None:
        self.settings = settings
        self.integrator = 0.0
        self.peak = 0.0

    def _limiter_db(self, sample: float) -> float:
        # Silence and non-normal values need no limiting and would stall
        # the peak detector.
        if not _is_normal(sample):
            return 0.0

        threshold_db = self.settings.normalisation_threshold_dbfs
        knee_db = self.settings.normalisation_knee_db

        bias_db = ratio_to_db(abs(sample)) - threshold_db
        knee_boundary_db = bias_db * 2.0

        if knee_boundary_db < -knee_db:
            return 0.0
        if knee_db > 0.0 and abs(knee_boundary_db) <= knee_db:
            return (knee_boundary_db + knee_db) ** 2 / (8.0 * knee_db)
        return bias_db

    def _limit(self, sample: float) -> float:
        limiter_db = self._limiter_db(sample)

        # Only work while the limiter is engaged or attack/release is running.
        if limiter_db > 0.0 or self.integrator > 0.0 or self.peak > 0.0:
            attack_cf = self.settings.normalisation_attack_cf
            release_cf = self.settings.normalisation_release_cf

            self.integrator = max(
                limiter_db,
                release_cf * self.integrator - release_cf * limiter_db + limiter_db,
            )
            self.peak = (
                attack_cf * self.peak - attack_cf * self.integrator + self.integrator
            )
            sample *= db_to_ratio(-self.peak)

        return sample

    def process(
        self,
        samples: MutableSequence[float],
        normalisation_factor: float,
        volume: float,
    ) -> MutableSequence[float]:
        """Scale ``samples`` in place and return the same sequence.

        Volume attenuation is always applied last.
        """
        settings = self.settings

        if not settings.normalisation:
            if volume < 1.0:
                samples[:] = [sample * volume for sample in samples]
        elif settings.normalisation_method is NormalisationMethod.BASIC:
            if normalisation_factor < 1.0 or volume < 1.0:
                gain = normalisation_factor * volume
                samples[:] = [sample * gain for sample in samples]
        elif settings.normalisation_method is NormalisationMethod.DYNAMIC:
            samples[:] = [
                self._limit(sample * normalisation_factor) * volume
                for sample in samples
            ]

        return samples