# waterclass/core/contract.py
"""
Classification Contract

Locked sentinels and thresholds that decide how readings map to classes.

If you change any constants in here, bump WATERCLASS_DECISION_VERSION.
"""

from decimal import Decimal

WATERCLASS_DECISION_VERSION = "0.1.0"

# Reporting conventions for text readings
NOT_DETECTED_TOKEN = "未检出"
DETECTION_LIMIT_SUFFIX = "L"  # "0.01L" = below the 0.01 reporting limit

# Range limits are written "min-max"
RANGE_SEPARATOR = "-"

# Black/odorous water bodies (urban), dissolved oxygen in mg/L
DO_MILD_THRESHOLD = Decimal("2.0")
DO_SEVERE_THRESHOLD = Decimal("0.2")

# Black/odorous, ammonia nitrogen in mg/L
NH3N_MILD_THRESHOLD = Decimal("8.0")
NH3N_SEVERE_THRESHOLD = Decimal("15.0")

# Black/odorous, transparency in cm
SD_MILD_THRESHOLD = Decimal("25.0")
SD_SEVERE_THRESHOLD = Decimal("10.0")

# Below this water depth (cm) transparency is judged relative to depth
SD_DEPTH_LINE = Decimal("25.0")
SD_DEPTH_LINE_RATIO = Decimal("0.4")
