"""
Constants for the Bandix dashboard.
"""

from typing import List, Tuple

from src.telemetry.sorting import SortField

# Chart height in terminal rows (4 braille dots each)
CHART_ROWS: int = 10

# Polling interval options (in milliseconds)
# Format: (milliseconds, display_label)
POLLING_INTERVALS: List[Tuple[int, str]] = [
    (500, "0.5 seconds"),
    (1000, "1 second"),
    (2000, "2 seconds"),
    (5000, "5 seconds"),
    (10000, "10 seconds"),
]

# Clients table columns: (key, label). Keys of sortable columns match SortField values.
TABLE_COLUMNS: List[Tuple[str, str]] = [
    (SortField.HOSTNAME.value, "Device"),
    (SortField.IP.value, "IP / MAC"),
    (SortField.DOWNLOAD_SPEED.value, "↓ Speed"),
    (SortField.UPLOAD_SPEED.value, "↑ Speed"),
    (SortField.DOWNLOAD.value, "↓ Total"),
    (SortField.UPLOAD.value, "↑ Total"),
    ("limit", "Limit"),
]

# Keyboard shortcuts for sorting, in table column order
SORT_KEYS: List[Tuple[str, SortField]] = [
    ("1", SortField.HOSTNAME),
    ("2", SortField.IP),
    ("3", SortField.DOWNLOAD_SPEED),
    ("4", SortField.UPLOAD_SPEED),
    ("5", SortField.DOWNLOAD),
    ("6", SortField.UPLOAD),
]
