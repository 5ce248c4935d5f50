"""
Parsers for CSV exports of the storage layer's inventory, deductions and
wastage tables. Each parser maps a raw DataFrame onto the validated record
models; the engine itself never touches files.
"""

import logging
from typing import TypeVar

import pandas as pd
from pydantic import BaseModel, ValidationError

from stock_analytics.schemas import DeductionEvent, InventoryItem, WastageEvent

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Exports written by hand (or by older tooling) use snake_case headers.
# Map them onto the stored record keys the models alias.
INVENTORY_COLUMN_MAP = {
    "id": "_id",
    "min_stock": "minStock",
    "cost_per_unit": "costPerUnit",
}

EVENT_COLUMN_MAP = {
    "id": "_id",
    "item_id": "itemId",
    "item_name": "itemName",
    "order_id": "orderId",
    "total_cost": "totalCost",
    "cost_loss": "costLoss",
    "created_at": "_creationTime",
}

# Identifier columns pandas may have read as numbers
ID_COLUMNS = ["_id", "itemId", "orderId"]


def _as_id(value) -> str:
    # Numeric id columns with blanks are read as floats: 1042.0 -> "1042"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _normalize_frame(df: pd.DataFrame, column_map: dict[str, str]) -> list[dict]:
    """
    Renames headers to the stored keys and forces identifier columns back
    to strings.
    """
    df = df.rename(columns={k: v for k, v in column_map.items() if k in df.columns})
    # Blank cells (None or NaN) are dropped so model defaults apply
    return [
        {str(k): _as_id(v) if k in ID_COLUMNS else v for k, v in rec.items() if pd.notna(v)}
        for rec in df.to_dict("records")
    ]


def _validate(
    records: list[dict], model: type[ModelT], source_name: str
) -> list[ModelT] | None:
    try:
        validated = [model.model_validate(row) for row in records]
    except ValidationError as e:
        logger.error(f"❌ {source_name} export failed validation!")
        logger.error(e)
        return None
    logger.info(f"✅ Parsed {len(validated)} {source_name} records.")
    return validated


def parse_inventory_export(df: pd.DataFrame) -> list[InventoryItem] | None:
    """Loads the inventory table export (one row per stock line)."""
    records = _normalize_frame(df, INVENTORY_COLUMN_MAP)
    return _validate(records, InventoryItem, "inventory")


def parse_deductions_export(df: pd.DataFrame) -> list[DeductionEvent] | None:
    """Loads the deductions log export (one row per item per fulfilled order)."""
    records = _normalize_frame(df, EVENT_COLUMN_MAP)
    return _validate(records, DeductionEvent, "deductions")


def parse_wastage_export(df: pd.DataFrame) -> list[WastageEvent] | None:
    """Loads the wastage log export."""
    records = _normalize_frame(df, EVENT_COLUMN_MAP)
    return _validate(records, WastageEvent, "wastage")
