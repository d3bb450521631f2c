"""All magic numbers and configuration constants."""

GEMINI_TTS_MODEL = "gemini-2.5-flash-preview-tts"
MAX_SEGMENT_LENGTH = 1200           # chars, longer segments time out server-side
CONCURRENCY_LIMIT = 2               # segments in flight at once
TTS_MAX_RETRIES = 12                # retries after the first attempt

INTERVAL_FLOOR = 3.5                # seconds between call starts (~17 RPM free tier)
INTERVAL_CEILING = 10.0             # slowest spacing the governor will back off to
THROTTLE_STEP = 1.5                 # seconds added per rate-limit response
RELAX_STEP = 1.0                    # seconds removed at the start of each job
RESERVE_JITTER = 0.3                # seconds, desynchronizes concurrent wakeups

RATE_LIMIT_BACKOFF_BASE = 5.0       # seconds, first retry delay after a 429
RATE_LIMIT_BACKOFF_JITTER = 2.0     # seconds of random extra delay after a 429
TRANSIENT_BACKOFF_BASE = 2.0        # seconds, first retry delay otherwise
BACKOFF_MULTIPLIER = 1.5

PROGRESS_CEILING = 98.0             # percent reported before assembly finishes

SAMPLE_RATE = 24000                 # Gemini TTS returns 24 kHz PCM
CHANNELS = 1
BITS_PER_SAMPLE = 16
WAV_HEADER_SIZE = 44

OUTPUT_BITRATE = "192k"             # MP3 export bitrate
DEFAULT_VOICE = "Kore"
DEFAULT_OUTPUT = "speech.wav"
ENV_PREFIX = "LONGFORM_TTS_"
VERSION = "0.1.0"
