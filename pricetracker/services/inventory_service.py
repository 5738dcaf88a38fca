from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, List, Tuple
import logging

from pricetracker.exceptions import (
    InvalidSuggestionError,
    OracleUnavailableError,
    PriceTrackerError,
    StorageError,
)
from pricetracker.models.price_history import PriceHistory
from pricetracker.models.product import Product
from pricetracker.services.price_history_service import PriceHistoryService
from pricetracker.services.pricing_advisor import PricingAdvisor
from pricetracker.services.product_service import ProductService

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Workflows spanning products and their price history.

    ORDERING RULES:
    ===============
    Pricing: the history entry and the new suggested price are committed in
    one transaction. If either write fails, both are rolled back, and nothing
    is written at all when the oracle fails.

    Deletion: history rows are deleted and committed before the product.
    If the product delete fails afterwards the history stays deleted; the
    product is never deleted first, since that would orphan its history.

    Two concurrent computations for the same product are not serialized:
    both history entries are kept and the last commit wins.
    """

    def __init__(
        self,
        db: Session,
        advisor: Optional[PricingAdvisor] = None,
        products: Optional[ProductService] = None,
        history: Optional[PriceHistoryService] = None,
    ):
        self.db = db
        self.advisor = advisor or PricingAdvisor()
        self.products = products or ProductService(db)
        self.history = history or PriceHistoryService(db)

    def compute_suggested_price(self, product_id: int) -> Product:
        """
        Ask the pricing oracle for a suggested price and record it.

        Args:
            product_id: Product to price

        Returns:
            The updated product

        Raises:
            ProductNotFoundError: If the product doesn't exist
            OracleUnavailableError: If the oracle call fails
            InvalidSuggestionError: If the oracle reply is not a number
            StorageError: If saving the result fails
        """
        product = self.products.get_by_id(product_id)

        try:
            suggested_price = self.advisor.suggest_price(product)
        except (OracleUnavailableError, InvalidSuggestionError) as e:
            logger.warning(f"Pricing failed for product #{product_id}: {e}")
            raise

        try:
            self.history.append(
                product_id=product.id,
                observed_price=product.current_price,
                suggested_price=suggested_price,
                commit=False,
            )
            self.products.set_suggested_price(product, suggested_price)
            self.db.commit()
        except PriceTrackerError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error storing suggested price for product #{product_id}: {e}")
            raise StorageError(f"Could not store suggested price for product #{product_id}") from e

        self.db.refresh(product)
        logger.info(f"Product #{product_id} suggested price set to {suggested_price}")
        return product

    def get_product_with_history(self, product_id: int) -> Tuple[Product, List[PriceHistory]]:
        """Return a product and its price history, newest first."""
        product = self.products.get_by_id(product_id)
        return product, self.history.list_for_product(product_id)

    def delete_product(self, product_id: int) -> None:
        """
        Delete a product together with its price history.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        self.products.get_by_id(product_id)
        self.history.delete_for_product(product_id)
        self.products.delete(product_id)
