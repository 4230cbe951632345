"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.money import MAX_AMOUNT
from domain.product import DEFAULT_COLOR, Product
from domain.sale import SaleEvent
from services.stats_service import Summary


# ============================================================================
# Product Models
# ============================================================================

class ProductRequest(BaseModel):
    """Product fields for create and edit."""
    name: str = Field(..., min_length=1, description="Display name")
    cost: Decimal = Field(..., ge=0, le=MAX_AMOUNT, description="Unit cost")
    price: Decimal = Field(..., ge=0, le=MAX_AMOUNT, description="Unit selling price")
    color: str = Field(DEFAULT_COLOR, description="Button colour (CSS)")
    image: Optional[str] = Field(None, description="Image as a data URL; omit to keep the current image")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Coffee",
                "cost": "1.50",
                "price": "4.00",
                "color": "#8B4513",
                "image": None
            }
        }
    )


class ProductResponse(BaseModel):
    """Single catalog entry."""
    id: str
    name: str
    cost: Decimal
    price: Decimal
    color: str
    image: Optional[str] = None

    @classmethod
    def from_domain(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            cost=product.cost,
            price=product.price,
            color=product.color,
            image=product.image,
        )


class ProductListResponse(BaseModel):
    items: List[ProductResponse]
    total_count: int


# ============================================================================
# Sale Models
# ============================================================================

class SaleRequest(BaseModel):
    """Request to record one sale."""
    product_id: str = Field(..., min_length=1, description="Catalog product ID")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "product_id": "1"
            }
        }
    )


class SaleResponse(BaseModel):
    """A recorded sale with its snapshotted product fields."""
    id: str
    product_id: str
    product_name: str
    cost: Decimal
    price: Decimal
    quantity: int
    timestamp: datetime

    @classmethod
    def from_domain(cls, sale: SaleEvent) -> "SaleResponse":
        return cls(
            id=sale.id,
            product_id=sale.product_id,
            product_name=sale.product_name,
            cost=sale.cost,
            price=sale.price,
            quantity=sale.quantity,
            timestamp=sale.timestamp,
        )


class SaleRecordedResponse(BaseModel):
    sale: SaleResponse
    undo_depth: int
    message: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "sale": {
                    "id": "5f0c2b4e9d8a4c1f8e7b6a5d4c3b2a10",
                    "product_id": "1",
                    "product_name": "Coffee",
                    "cost": "1.50",
                    "price": "4.00",
                    "quantity": 1,
                    "timestamp": "2025-01-01T09:00:00Z"
                },
                "undo_depth": 1,
                "message": "Sold: Coffee - $4.00"
            }
        }
    )


class UndoResponse(BaseModel):
    """Result of an undo. `undone` is null when nothing was removed."""
    undone: Optional[SaleResponse] = None
    undo_depth: int
    message: str


class ClearSalesResponse(BaseModel):
    removed: int
    message: str


# ============================================================================
# Stats Models
# ============================================================================

class SummaryResponse(BaseModel):
    """Totals for one reporting window."""
    period: str
    window_start: datetime
    item_count: int
    revenue: Decimal
    cost: Decimal
    profit: Decimal
    profitable: bool
    formatted: Dict[str, str]
    recent_sales: List[SaleResponse]

    @classmethod
    def from_domain(cls, summary: Summary) -> "SummaryResponse":
        return cls(
            period=summary.period.value,
            window_start=summary.window_start,
            item_count=summary.item_count,
            revenue=summary.revenue,
            cost=summary.cost,
            profit=summary.profit,
            profitable=summary.is_profitable,
            formatted=summary.formatted(),
            recent_sales=[SaleResponse.from_domain(s) for s in summary.recent],
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "period": "daily",
                "window_start": "2025-01-01T00:00:00-06:00",
                "item_count": 1,
                "revenue": "4.00",
                "cost": "1.50",
                "profit": "2.50",
                "profitable": True,
                "formatted": {"revenue": "$4.00", "cost": "$1.50", "profit": "$2.50"},
                "recent_sales": []
            }
        }
    )


# ============================================================================
# Backup Models
# ============================================================================

class ImportResponse(BaseModel):
    products_replaced: bool
    sales_replaced: bool
    product_count: int
    sale_count: int
    message: str


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Invalid request",
                "detail": "Product not found: 42",
                "status_code": 404
            }
        }
    )
