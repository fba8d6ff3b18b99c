"""
Configuration settings for ReviewPulse.

Centralized configuration for the ingestion pipeline and its collaborators.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("REVIEWPULSE_DATA_ROOT", str(PROJECT_ROOT / "data")))

# Canonical CSV layout
CANONICAL_COLUMNS = ["author", "date", "content", "rating", "source"]
CANONICAL_HEADER = ",".join(CANONICAL_COLUMNS)

# Defaults filled in when a cell is blank
DEFAULT_AUTHOR = "Anonymous"
DEFAULT_SOURCE = "google"
MAX_RATING = 5

# Header discovery
HEADER_SCAN_ROWS = 10  # Metadata rows tolerated before the real header
HEADER_MARKERS = ("reviewer", "author")

# Time windows
DAYS_PER_MONTH = 30  # "Last month" means 30 days, not a calendar month
TIME_FILTER_OPTIONS = ["all", "0.25", "1", "3", "6"]

# Relative dates are resolved against this instant when set (ISO format).
# Empty means "now" at call time.
REFERENCE_DATE = os.getenv("REVIEWPULSE_REFERENCE_DATE", "")

# Analysis collaborator
MAX_ANALYSIS_CHARS = 30000
ANALYSIS_CONTEXTS = ("table", "item")

# Logging
LOG_LEVEL = os.getenv("REVIEWPULSE_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "reviewpulse.log"


# Design Rationale and Trade-offs:
#
# 1. Why module constants instead of a config object?
#    - Imported once, read everywhere as settings.NAME
#    - Tests override by passing arguments, not by patching globals
#    - Trade-off: No reload at runtime
#
# 2. Why only a few env overrides?
#    - Data location, reference date and log level vary per deployment
#    - Parsing constants (header markers, 30-day month) are part of the data format
#    - Trade-off: Changing the format rules needs a code change
