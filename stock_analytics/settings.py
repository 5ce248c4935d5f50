import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

# --- Filename Configuration ---
# Exports from the storage layer, e.g. "inventory_export_2026-10-19.csv"
INVENTORY_FILENAME_PREFIX = os.getenv("INVENTORY_FILENAME_PREFIX", "inventory_export_")
DEDUCTIONS_FILENAME_PREFIX = os.getenv("DEDUCTIONS_FILENAME_PREFIX", "deductions_export_")
WASTAGE_FILENAME_PREFIX = os.getenv("WASTAGE_FILENAME_PREFIX", "wastage_export_")
REPORT_FILENAME_BASE = os.getenv("REPORT_FILENAME_BASE", "stock_report")

# --- Output Toggles ---
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Shared Business Logic ---
# Trailing window (days) for the average daily usage rate.
USAGE_WINDOW_DAYS = int(os.getenv("USAGE_WINDOW_DAYS", "7"))

# Restock suggestions top stock up to this many days of usage.
RESTOCK_COVERAGE_DAYS = int(os.getenv("RESTOCK_COVERAGE_DAYS", "14"))

# An item needs restocking once it projects to run out within this many days.
RESTOCK_HORIZON_DAYS = int(os.getenv("RESTOCK_HORIZON_DAYS", "7"))

# Low-stock triage marks an item critical at or below this many days left.
CRITICAL_DAYS_LEFT = 2

# Stock badge: CRITICAL at or below this fraction of min stock.
CRITICAL_STOCK_RATIO = 0.5

# Per-item drill-down trend length (and the divisor for its average usage).
ITEM_TREND_DAYS = 30

TOP_LOSS_LIMIT = 5
TIMELINE_PREVIEW_LIMIT = 10

# Display-only stand-in for "no projection" (zero usage). Never used in math.
NO_PROJECTION_DAYS = 999

# Known wastage causes, in the order the entry form offers them.
WASTAGE_REASONS = [
    "Expired",
    "Spoiled",
    "Damaged",
    "Overcooked",
    "Dropped",
    "Theft",
    "Other",
]

INVENTORY_CATEGORIES = [
    "oils",
    "dairy",
    "meat",
    "grains",
    "vegetables",
    "spices",
    "other",
]

DATE_RANGE_PRESETS = ["today", "yesterday", "week", "month", "custom"]
