"""Fixed audio parameters shared by the playback modules."""

SAMPLE_RATE: int = 44100
NUM_CHANNELS: int = 2
SAMPLES_PER_SECOND: int = SAMPLE_RATE * NUM_CHANNELS
PAGES_PER_MS: float = SAMPLE_RATE / 1000.0
MS_PER_PAGE: float = 1000.0 / SAMPLE_RATE