from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey
from sqlalchemy.sql import func

from pricetracker.database import Base


class PriceHistory(Base):
    """
    One pricing computation for a product.

    Rows are never updated. Deleting a product does not cascade here:
    the delete workflow removes history rows first.

    Attributes:
        id: Unique identifier for the entry
        product_id: Reference to the priced product
        timestamp: When the suggestion was computed
        observed_price: The product's current price at computation time
        suggested_price: Price suggested by the pricing oracle
    """
    __tablename__ = "price_history"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    observed_price = Column(Float, nullable=True)
    suggested_price = Column(Float, nullable=False)

    def __repr__(self):
        return (
            f"<PriceHistory(id={self.id}, product_id={self.product_id}, "
            f"suggested_price={self.suggested_price})>"
        )
