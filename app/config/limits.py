"""
Processing limits and constants.

Centralized configuration for upload caps, rendering limits, retry delays
and comparison thresholds used across the analysis pipeline.
"""

# Upload limits
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
"""Maximum accepted report size (10 MB)"""

MAX_PDF_PAGES = 5
"""Maximum PDF pages rendered to images for the vision model"""

PDF_RENDER_DPI = 150
"""Resolution used when rasterizing PDF pages"""

# OCR service
OCR_RETRY_DELAYS = (1.0, 2.0, 4.0)
"""Backoff delays in seconds between OCR retries (one retry per entry)"""

OCR_RETRYABLE_STATUS = (429, 500)
"""HTTP status codes from the OCR service that trigger a retry"""

# Comparison
TREND_STABLE_PERCENT = 5.0
"""Relative change (in percent) below which a trend is reported as stable"""

ABSENT_MARKER = "—"
"""Placeholder rendered for a test missing from a date column"""

NORMALIZATION_CACHE_SIZE = 128
"""Maximum number of distinct name sets whose normalization result is kept"""

# OCR passphrase
PASSPHRASE_COOLDOWN_SECONDS = 60
"""Lockout after a failed passphrase attempt, per client IP"""
