from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class PriceHistoryResponse(BaseModel):
    """Schema for a single price history entry."""
    id: int
    product_id: int
    timestamp: datetime
    observed_price: Optional[float] = None
    suggested_price: float

    model_config = ConfigDict(from_attributes=True)
