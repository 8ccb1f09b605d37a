"""
Configuration constants for the Circuit Challenge puzzle generator.
"""

from pathlib import Path

# Output directories (used by the command line tool only)
RESULTS_DIR = Path("results")
VISUALIZATIONS_SUBDIR = "visualizations"

# Generation budgets
DEFAULT_MAX_ATTEMPTS = 20
PATH_MAX_ATTEMPTS = 100
EXPRESSION_MAX_ATTEMPTS = 10

# Path shape
MIN_PATH_FRACTION = 0.6
MAX_PATH_FRACTION = 0.85
MIN_PATH_FLOOR = 4
MIN_DIRECTION_CHANGES = 3
FINISH_BIAS = 0.7

# Expression limits
MAX_DIVIDEND = 144
MAX_DIVISOR_CAP = 12

# Visualization settings
VIZ_DPI = 150
VIZ_FIGSIZE = (10, 8)

# Logging configuration
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
