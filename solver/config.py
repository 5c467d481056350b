"""Centralized configuration for Complex Calc.

Every value can be overridden with an environment variable prefixed with
``COMPLEXCALC_`` (e.g. ``COMPLEXCALC_PIVOT_TOLERANCE=1e-12``).
"""

import os

_PROJECT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")

# System size limits
MIN_SYSTEM_SIZE = 1
MAX_SYSTEM_SIZE = int(os.getenv("COMPLEXCALC_MAX_SYSTEM_SIZE", "10"))

# Squared pivot magnitude below which the matrix is reported as singular
PIVOT_TOLERANCE = float(os.getenv("COMPLEXCALC_PIVOT_TOLERANCE", "1e-10"))

# Significant digits used by the polar / rectangular display strings
DISPLAY_PRECISION = int(os.getenv("COMPLEXCALC_DISPLAY_PRECISION", "4"))

# Largest |A·x − b| per row accepted when verifying a solution
RESIDUAL_TOLERANCE = float(os.getenv("COMPLEXCALC_RESIDUAL_TOLERANCE", "1e-6"))

# Persistence (saved systems, theme preference)
DATA_FILE = os.getenv(
    "COMPLEXCALC_DATA_FILE",
    os.path.join(_PROJECT_DIR, "data", "complexcalc.json"),
)

LOG_LEVEL = os.getenv("COMPLEXCALC_LOG_LEVEL", "WARNING")
