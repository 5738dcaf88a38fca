from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from pricetracker.models.product import Category, Quality, Urgency
from pricetracker.schemas.price_history import PriceHistoryResponse


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    category: Category = Field(..., description="Product category")
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    brand: str = Field(..., min_length=1, max_length=255, description="Product brand")
    purchase_price: float = Field(..., gt=0, description="Purchase price (must be positive)")
    current_price: Optional[float] = Field(None, ge=0, description="Current selling price")
    quality: Quality = Field(..., description="Product quality")
    urgency: Urgency = Field(..., description="How urgently the product has to be sold")

    model_config = ConfigDict(use_enum_values=True)


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    photo_path: Optional[str] = Field(None, max_length=512, description="Relative path to the product photo")


class ProductUpdate(ProductBase):
    """
    Schema for editing a product. All mutable fields are replaced;
    photo_path is kept when omitted.
    """
    photo_path: Optional[str] = Field(None, max_length=512, description="New photo path, if a new photo was stored")


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: int
    photo_path: Optional[str] = None
    suggested_price: Optional[float] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class ProductDetailResponse(ProductResponse):
    """Product together with its price history, newest first."""
    history: list[PriceHistoryResponse] = []


class ProductListResponse(BaseModel):
    """Schema for paginated product list response."""
    items: list[ProductResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
