from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, List
import logging

from pricetracker.exceptions import StorageError
from pricetracker.models.price_history import PriceHistory

logger = logging.getLogger(__name__)


class PriceHistoryService:
    """Append-only log of pricing computations, scoped by product."""

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        product_id: int,
        observed_price: Optional[float],
        suggested_price: float,
        commit: bool = True,
    ) -> PriceHistory:
        """
        Record a pricing computation.

        Args:
            product_id: Priced product
            observed_price: The product's current price before the update
            suggested_price: The computed suggestion
            commit: When False the entry is only flushed, so it can share
                a transaction with the product update

        Returns:
            The new entry
        """
        entry = PriceHistory(
            product_id=product_id,
            observed_price=observed_price,
            suggested_price=suggested_price,
        )
        self.db.add(entry)
        try:
            if commit:
                self.db.commit()
                self.db.refresh(entry)
            else:
                self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving price history for product #{product_id}: {e}")
            raise StorageError(f"Could not save price history for product #{product_id}") from e
        return entry

    def list_for_product(self, product_id: int) -> List[PriceHistory]:
        """Return the product's entries, newest first."""
        return (
            self.db.query(PriceHistory)
            .filter(PriceHistory.product_id == product_id)
            .order_by(PriceHistory.timestamp.desc(), PriceHistory.id.desc())
            .all()
        )

    def delete_for_product(self, product_id: int) -> int:
        """
        Delete every entry of a product. Idempotent.

        Returns:
            Number of deleted entries
        """
        try:
            deleted = (
                self.db.query(PriceHistory)
                .filter(PriceHistory.product_id == product_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting price history for product #{product_id}: {e}")
            raise StorageError(f"Could not delete price history for product #{product_id}") from e

        logger.info(f"Deleted {deleted} price history entries for product #{product_id}")
        return deleted
