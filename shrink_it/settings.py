"""Tuning constants for the compression engine."""

# =============================================================================
# QUALITY
# =============================================================================
# Quality bounds shared by every lossy encoder (maps to codec quality 1-100)
MIN_QUALITY = 0.01
MAX_QUALITY = 1.0

# First attempt for lossy formats, at native size
INITIAL_QUALITY = 0.95

# Lossless formats ignore quality; this stands in for it
LOSSLESS_QUALITY = 1.0

# =============================================================================
# QUALITY SEARCH
# =============================================================================
MAX_SEARCH_ITERATIONS = 10

# An encode in (SWEET_SPOT_RATIO * target, target] ends the search
SWEET_SPOT_RATIO = 0.9

# =============================================================================
# DIMENSION SCALING
# =============================================================================
MAX_SCALE_ITERATIONS = 10
SCALE_FACTOR = 0.9

# Fixed quality used for lossy formats while shrinking dimensions
FALLBACK_QUALITY = 0.5

# =============================================================================
# ENCODING
# =============================================================================
# Transparent areas are flattened onto this color for JPEG
JPEG_BACKGROUND = (0, 0, 0)

# Prefix for files written by compress_file
OUTPUT_PREFIX = "shrunk"
