"""
Core Data Models for SmartSpend

These models define the schemas for everything the dashboard works with:
1. Receipt records as returned by the extraction service
2. Image payloads sent to it
3. Derived chart datasets and summary numbers
4. The chart catalog and which charts are visible

DESIGN DECISION: Records are frozen. They are created once from the
extraction output and never edited; the only way to get rid of one
is clearing the whole store.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# =============================================================================
# RECEIPT RECORDS
# =============================================================================

class ReceiptRecord(BaseModel):
    """
    One extracted receipt.

    DESIGN DECISION: `category` is free text, not an enum. The extraction
    model picks it from an open vocabulary and we group on the exact text.
    Merchant and category are kept exactly as extracted (no stripping, no
    case folding).
    """
    model_config = ConfigDict(frozen=True)

    merchant: str = Field(
        ...,
        min_length=1,
        description="Merchant name as printed on the receipt"
    )
    date: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Purchase date, YYYY-MM-DD"
    )
    total: Decimal = Field(
        ...,
        ge=0,
        description="Amount paid, in the user's (untracked) currency"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Spending category chosen by the extraction model"
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional free text shown in tables and exports"
    )

    @field_validator("date")
    @classmethod
    def validate_calendar_date(cls, v: str) -> str:
        """The fixed-width text form is kept, but it must be a real date."""
        datetime.date.fromisoformat(v)
        return v

    @field_serializer("total", when_used="json")
    def serialize_total(self, v: Decimal) -> float:
        """JSON consumers (the endpoint, AI prompts) get a plain number."""
        return float(v)


class ImagePayload(BaseModel):
    """An uploaded receipt image, ready to be sent to the extraction service."""
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(
        ...,
        description="Raw image bytes"
    )
    mime_type: str = Field(
        ...,
        min_length=1,
        description="Declared media type, e.g. image/jpeg"
    )


# =============================================================================
# DERIVED DATASETS
# =============================================================================

class GroupTotal(BaseModel):
    """Summed amount for one grouping key (category, merchant or date)."""
    model_config = ConfigDict(frozen=True)

    key: str
    total: Decimal


class GroupCount(BaseModel):
    """Number of records for one grouping key."""
    model_config = ConfigDict(frozen=True)

    key: str
    count: int = Field(ge=0)


class DashboardData(BaseModel):
    """
    Everything the dashboard shows, computed from one store snapshot.

    Never cached: build a new one on every render.
    """
    model_config = ConfigDict(frozen=True)

    category_totals: list[GroupTotal] = Field(default_factory=list)
    merchant_totals: list[GroupTotal] = Field(default_factory=list)
    daily_totals: list[GroupTotal] = Field(default_factory=list)
    category_counts: list[GroupCount] = Field(default_factory=list)

    total_spend: Decimal = Decimal("0")
    top_category: Optional[str] = Field(
        default=None,
        description="None when there are no records"
    )
    record_count: int = Field(default=0, ge=0)


# =============================================================================
# CHART CATALOG AND SELECTION
# =============================================================================

class ChartType(str, Enum):
    """
    The fixed chart catalog.

    Constructing a ChartType from an unknown id raises ValueError; that is a
    programming error, not something the UI recovers from.
    """
    CATEGORY_PIE = "category_pie"
    MERCHANT_BAR = "merchant_bar"
    DAILY_TREND = "daily_trend"
    CATEGORY_COUNT = "category_count"


class ChartInfo(BaseModel):
    """Display metadata for one catalog entry."""
    model_config = ConfigDict(frozen=True)

    chart: ChartType
    title: str
    description: str


CHART_CATALOG: tuple[ChartInfo, ...] = (
    ChartInfo(
        chart=ChartType.CATEGORY_PIE,
        title="Gastos por Categoría",
        description="Distribución porcentual de tu dinero.",
    ),
    ChartInfo(
        chart=ChartType.MERCHANT_BAR,
        title="Top Comercios",
        description="¿Dónde estás gastando más?",
    ),
    ChartInfo(
        chart=ChartType.DAILY_TREND,
        title="Tendencia Diaria",
        description="Historial de gastos día a día.",
    ),
    ChartInfo(
        chart=ChartType.CATEGORY_COUNT,
        title="Frecuencia de Compra",
        description="¿Qué categorías compras más seguido?",
    ),
)

DEFAULT_CHARTS = frozenset({ChartType.CATEGORY_PIE, ChartType.MERCHANT_BAR})


class ChartSelection(BaseModel):
    """
    Which catalog charts are currently visible.

    Independent of the data: a chart can be selected while its dataset
    is empty.
    """
    model_config = ConfigDict(frozen=True)

    active: frozenset[ChartType] = Field(default=DEFAULT_CHARTS)

    def toggle(self, chart: ChartType) -> "ChartSelection":
        """Remove the chart if visible, add it otherwise."""
        chart = ChartType(chart)
        if chart in self.active:
            return ChartSelection(active=self.active - {chart})
        return ChartSelection(active=self.active | {chart})

    def is_visible(self, chart: ChartType) -> bool:
        return ChartType(chart) in self.active

    def visible(self) -> list[ChartType]:
        """Visible charts in catalog order."""
        return [info.chart for info in CHART_CATALOG if info.chart in self.active]
