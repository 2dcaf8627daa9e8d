# playcore

Building blocks for an audio player's output path. They work on interleaved
stereo PCM at 44.1 kHz (`playcore.constants`), held as floating point samples
in the range `-1.0..=1.0`.

## Modules

- `playcore.constants`: `SAMPLE_RATE`, `NUM_CHANNELS`, `SAMPLES_PER_SECOND`,
  `PAGES_PER_MS` and `MS_PER_PAGE`.
- `playcore.dither`: sources of dither noise for requantisation.
  `TriangularDitherer` (`"tpdf"`), `GaussianDitherer` (`"gpdf"`) and
  `HighPassDitherer` (`"tpdf_hp"`). Each one takes an optional
  `random.Random`. `find_ditherer(name)` returns the class registered under
  that name, or `None`.
- `playcore.convert`: `Converter` turns float samples into F32, S32, S24 (in a
  32-bit word), S24_3 (three bytes in native order) and S16. Values are
  rounded to the nearest integer and saturated. When it is given a ditherer
  builder, it adds that ditherer's noise before rounding.
- `playcore.gain`: `db_to_ratio`, `ratio_to_db`, `duration_to_coefficient` and
  `coefficient_to_duration`. It also has `NormalisationSettings` and
  `NormalisationData`. `NormalisationData.parse_from_ogg(stream)` reads the
  four little-endian floats stored at byte 144 of an Ogg file.
  `get_factor(settings)` computes the gain with the basic method or the
  dynamic method.
- `playcore.limiter`: `Normaliser.process(samples, normalisation_factor,
  volume)` applies volume and basic normalisation to a mutable sequence of
  samples, in place. With the dynamic method it applies a feed-forward
  soft-knee limiter instead. The limiter's state carries over from one call
  to the next.
- `playcore.subfile`: `Subfile` is a seekable view of a stream in which a
  fixed byte offset appears as position 0.

## Example

```python
from playcore.convert import Converter
from playcore.dither import find_ditherer
from playcore.gain import NormalisationData, NormalisationSettings, db_to_ratio
from playcore.limiter import Normaliser

converter = Converter(find_ditherer("tpdf"))
pcm = converter.f64_to_s16([0.0, 0.5, -0.5, 1.0])

print(db_to_ratio(-6.0))  # about 0.501

settings = NormalisationSettings(normalisation=True)
with open("track.ogg", "rb") as stream:
    factor = NormalisationData.parse_from_ogg(stream).get_factor(settings)

samples = [0.2, -0.9, 0.95]
Normaliser(settings).process(samples, factor, volume=0.8)
```

## What it does not do

This package does not decode audio, fetch or decrypt tracks, or write to a
sound device. It has no player state machine, no mixer backend and no
command-line program. It only transforms samples and reads header values
that it is given.

## Tests

```
pip install -e ".[test]"
pytest
```