"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# face-api.js / dlib recognizers emit 128 floats per face.
DEFAULT_DESCRIPTOR_DIM = 128
DEFAULT_MATCH_THRESHOLD = 0.5
DEFAULT_COOLDOWN_SECONDS = 60
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_CAPTURE_ATTEMPTS = 5
DEFAULT_CAPTURE_BACKOFF_SECONDS = 0.2
