from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime) -> datetime:
    """Epoch timestamps parse as aware UTC; offset-less ISO strings are taken as UTC too."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# --- Input Records (as persisted by the storage layer) ---


class InventoryItem(BaseModel):
    """
    Snapshot of one raw-material stock line.
    Aliases match the stored record keys so exports validate directly,
    while populate_by_name lets callers use the snake_case names.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., alias="_id")
    name: str
    unit: str = "kg"
    quantity: float = Field(default=0, ge=0)
    min_stock: float = Field(default=0, ge=0, alias="minStock")
    cost_per_unit: float = Field(default=0, ge=0, alias="costPerUnit")
    category: str = "other"


class DeductionEvent(BaseModel):
    """Stock leaving via order fulfillment ("usage")."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default="", alias="_id")
    item_id: str = Field(..., alias="itemId")
    quantity: float = Field(..., gt=0)
    order_id: Optional[str] = Field(default=None, alias="orderId")
    date: date
    created_at: datetime = Field(..., alias="_creationTime")
    # Snapshots written alongside the record at deduction time
    item_name: Optional[str] = Field(default=None, alias="itemName")
    unit: Optional[str] = None
    total_cost: Optional[float] = Field(default=None, ge=0, alias="totalCost")

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class WastageEvent(BaseModel):
    """Stock lost to spoilage, damage, theft, etc."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default="", alias="_id")
    item_id: str = Field(..., alias="itemId")
    quantity: float = Field(..., gt=0)
    reason: str = "Other"
    date: date
    created_at: datetime = Field(..., alias="_creationTime")
    item_name: Optional[str] = Field(default=None, alias="itemName")
    cost_loss: Optional[float] = Field(default=None, ge=0, alias="costLoss")

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


# --- Normalized Movements ---


class _Movement(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    item_id: str
    item_name: str
    unit: str = ""
    quantity: float
    value: float
    date: date
    created_at: datetime


class UsedEvent(_Movement):
    kind: Literal["USED"] = "USED"
    order_id: Optional[str] = None


class WastedEvent(_Movement):
    kind: Literal["WASTED"] = "WASTED"
    reason: str


StockEvent = Annotated[Union[UsedEvent, WastedEvent], Field(discriminator="kind")]


# --- Derived Results ---


class StockStatus(str, Enum):
    ZERO = "ZERO"
    CRITICAL = "CRITICAL"
    LOW = "LOW"
    OK = "OK"


class DateRange(BaseModel):
    """Inclusive calendar-date bounds for a report."""

    start: date
    end: date
    label: str = "Custom"

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class StockoutProjection(BaseModel):
    item_id: str
    daily_usage: float
    # None means no usage in the window, so no meaningful projection
    days_left: Optional[float]
    needs_restock: bool
    is_critical: bool
    status: StockStatus


class RestockSuggestion(BaseModel):
    item_id: str
    name: str
    unit: str
    quantity: float
    daily_usage: float
    days_left: Optional[float]
    target_stock: float
    suggested_qty: int = Field(..., gt=0)
    suggested_cost: float
    needs_restock: bool = True


class RestockPlan(BaseModel):
    suggestions: list[RestockSuggestion] = Field(default_factory=list)
    total_restock_cost: float = 0.0


class LowStockEntry(BaseModel):
    item_id: str
    name: str
    unit: str
    quantity: float
    min_stock: float
    daily_usage: float
    days_left: Optional[float]
    reorder_qty: float
    reorder_cost: float
    is_zero: bool
    is_critical: bool


class LowStockReport(BaseModel):
    entries: list[LowStockEntry] = Field(default_factory=list)
    total_reorder_cost: float = 0.0


class TruthTableRow(BaseModel):
    item_id: str
    name: str
    category: str
    unit: str
    cost_per_unit: float
    opening_stock: float
    closing_stock: float
    purchased: float = 0.0
    used: float = 0.0
    wasted: float = 0.0
    money_burned: float = 0.0
    wastage_cost: float = 0.0
    avg_daily_usage: float = 0.0


class TruthTable(BaseModel):
    start: date
    end: date
    rows: list[TruthTableRow] = Field(default_factory=list)
    total_money_burned: float = 0.0
    total_wastage_cost: float = 0.0


class TopLossItem(BaseModel):
    item_id: str
    name: str
    cost: float
    quantity: float


class WastageReport(BaseModel):
    total_wasted: float = 0.0
    total_used: float = 0.0
    wastage_percent: float = 0.0
    month_to_date_loss: float = 0.0
    projected_monthly_loss: float = 0.0
    top_items: list[TopLossItem] = Field(default_factory=list)
    # Ordered by cost, highest first
    by_reason: dict[str, float] = Field(default_factory=dict)


class DashboardSummary(BaseModel):
    total_items: int = 0
    total_stock_value: float = 0.0
    consumed_value: float = 0.0
    consumed_count: int = 0
    wasted_value: float = 0.0
    monthly_wastage_loss: float = 0.0
    low_stock_count: int = 0
    zero_stock_count: int = 0


class DailyMovement(BaseModel):
    day: date
    used: float = 0.0
    wasted: float = 0.0


class ItemDetail(BaseModel):
    item_id: str
    name: str
    unit: str
    status: StockStatus
    current_value: float
    total_used: float
    total_wasted: float
    total_usage_cost: float
    total_wastage_cost: float
    avg_daily_usage: float
    days_until_empty: Optional[float]
    usage_percent: float
    wastage_percent: float
    wastage_by_reason: dict[str, float] = Field(default_factory=dict)
    trend: list[DailyMovement] = Field(default_factory=list)


class StockReport(BaseModel):
    """Everything the reports page renders for one date range."""

    generated_at: datetime
    date_range: DateRange
    summary: DashboardSummary
    restock_plan: RestockPlan
    low_stock: LowStockReport
    truth_table: TruthTable
    wastage: WastageReport
    movements: list[StockEvent] = Field(default_factory=list)
