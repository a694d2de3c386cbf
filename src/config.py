"""Configuration module for the mountainplot project.

Centralizes rendering constants and default settings.
"""

# Output geometry defaults
DEFAULT_ELEVATION_SPAN = 5000.0  # meters, used when neither height nor elevations are given
DEFAULT_METERS_PER_PIXEL = 1.0

# Histogram rendering
FALLOFF_EXPONENT = 0.3  # weight = (distsq + 1) ** -FALLOFF_EXPONENT
SPLAT_MODES = ("bilinear", "nearest")
DEFAULT_SPLAT = "bilinear"

# Tone mapping
TONE_GAIN = 0.6
TONE_EXPONENT = 6

# Mean profile overlay
PROFILE_SMOOTHING_ITERATIONS = 10
PROFILE_EPSILON = 1.0e-5

# Default settings
DEFAULT_OUTPUT = "out.png"
DEFAULT_LOG_LEVEL = "INFO"
