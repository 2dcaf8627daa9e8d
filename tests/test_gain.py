import io
import math
import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from playcore.gain import (
    DB_VOLTAGE_RATIO,
    PCM_AT_0DBFS,
    NormalisationData,
    NormalisationMethod,
    NormalisationSettings,
    NormalisationType,
    coefficient_to_duration,
    db_to_ratio,
    duration_to_coefficient,
    ratio_to_db,
)


def _ogg_with_data(values, offset=144):
    return io.BytesIO(b"\x00" * offset + struct.pack("<4f", *values) + b"\xff" * 8)


def test_zero_db_is_unity():
    assert db_to_ratio(0.0) == 1.0
    assert ratio_to_db(1.0) == 0.0


def test_voltage_ratio_constant():
    assert db_to_ratio(DB_VOLTAGE_RATIO) == pytest.approx(10.0)
    assert ratio_to_db(10.0) == pytest.approx(DB_VOLTAGE_RATIO)


@given(st.floats(min_value=-120.0, max_value=40.0))
def test_db_round_trip(db):
    assert ratio_to_db(db_to_ratio(db)) == pytest.approx(db, abs=1e-9)


@given(st.floats(min_value=0.0001, max_value=10.0))
def test_coefficient_round_trip(seconds):
    coefficient = duration_to_coefficient(seconds)
    assert 0.0 < coefficient < 1.0
    assert coefficient_to_duration(coefficient) == pytest.approx(seconds, rel=1e-6)


def test_default_data():
    data = NormalisationData()
    assert (data.track_gain_db, data.track_peak, data.album_gain_db, data.album_peak) == (
        0.0,
        1.0,
        0.0,
        1.0,
    )


def test_parse_from_ogg_reads_values():
    values = (-7.5, 0.75, -3.25, 0.5)
    data = NormalisationData.parse_from_ogg(_ogg_with_data(values))
    assert data == NormalisationData(
        track_gain_db=-7.5, track_peak=0.75, album_gain_db=-3.25, album_peak=0.5
    )


def test_parse_from_ogg_short_stream_raises():
    stream = io.BytesIO(b"\x00" * 150)
    with pytest.raises(EOFError):
        NormalisationData.parse_from_ogg(stream)


def test_disabled_normalisation_gives_unity():
    data = NormalisationData(track_gain_db=-10.0, track_peak=2.0)
    assert data.get_factor(NormalisationSettings(normalisation=False)) == 1.0


def test_basic_attenuating_gain():
    settings = NormalisationSettings(
        normalisation=True,
        normalisation_type=NormalisationType.TRACK,
        normalisation_method=NormalisationMethod.BASIC,
    )
    data = NormalisationData(track_gain_db=-6.0, track_peak=0.5)
    assert data.get_factor(settings) == pytest.approx(db_to_ratio(-6.0))


def test_basic_limits_to_inverse_peak():
    settings = NormalisationSettings(
        normalisation=True,
        normalisation_type=NormalisationType.TRACK,
        normalisation_method=NormalisationMethod.BASIC,
    )
    data = NormalisationData(track_gain_db=0.0, track_peak=2.0)
    assert data.get_factor(settings) == pytest.approx(1.0 / 2.0)


def test_basic_never_exceeds_0dbfs():
    settings = NormalisationSettings(
        normalisation=True,
        normalisation_type=NormalisationType.TRACK,
        normalisation_method=NormalisationMethod.BASIC,
    )
    data = NormalisationData(track_gain_db=6.0, track_peak=0.25)
    assert data.get_factor(settings) == PCM_AT_0DBFS


def test_dynamic_allows_boost():
    settings = NormalisationSettings(
        normalisation=True,
        normalisation_type=NormalisationType.TRACK,
        normalisation_method=NormalisationMethod.DYNAMIC,
        normalisation_pregain_db=1.0,
    )
    data = NormalisationData(track_gain_db=5.0, track_peak=1.0)
    assert data.get_factor(settings) == pytest.approx(db_to_ratio(6.0))


def test_album_type_uses_album_values():
    settings = NormalisationSettings(
        normalisation=True,
        normalisation_type=NormalisationType.ALBUM,
        normalisation_method=NormalisationMethod.DYNAMIC,
    )
    data = NormalisationData(track_gain_db=-1.0, album_gain_db=-9.0)
    assert data.get_factor(settings) == pytest.approx(db_to_ratio(-9.0))


def test_auto_type_falls_back_to_track_values():
    settings = NormalisationSettings(
        normalisation=True,
        normalisation_type=NormalisationType.AUTO,
        normalisation_method=NormalisationMethod.DYNAMIC,
    )
    data = NormalisationData(track_gain_db=-4.0, album_gain_db=-9.0)
    assert data.get_factor(settings) == pytest.approx(db_to_ratio(-4.0))


@given(
    st.floats(min_value=-30.0, max_value=30.0),
    st.floats(min_value=0.01, max_value=4.0),
    st.floats(min_value=-10.0, max_value=10.0),
)
def test_basic_factor_invariants(gain_db, peak, pregain_db):
    settings = NormalisationSettings(
        normalisation=True,
        normalisation_type=NormalisationType.TRACK,
        normalisation_method=NormalisationMethod.BASIC,
        normalisation_pregain_db=pregain_db,
    )
    factor = NormalisationData(track_gain_db=gain_db, track_peak=peak).get_factor(settings)
    assert 0.0 < factor <= PCM_AT_0DBFS
    assert factor <= 1.0 / peak + 1e-12
    assert math.isfinite(factor)