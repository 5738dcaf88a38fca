from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Optional, List
import logging

from pricetracker.exceptions import ProductNotFoundError, StorageError, ValidationError
from pricetracker.models.product import Product
from pricetracker.schemas.product import ProductCreate, ProductUpdate
from pricetracker.utils.text import fold_column, fold_text

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2

# Fields replaced wholesale by an edit
MUTABLE_FIELDS = (
    "category",
    "name",
    "brand",
    "purchase_price",
    "current_price",
    "quality",
    "urgency",
)


class ProductService:
    """
    Service class for Product CRUD operations.

    This service handles:
    - Creating new products
    - Reading products (by ID, by category)
    - Updating products
    - Deleting products (history is the caller's concern)
    - Prefix search on accent-folded names
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, product_data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            product_data: Product creation data

        Returns:
            Created product instance

        Raises:
            ValidationError: If the row violates a table constraint
        """
        product = Product(
            category=product_data.category,
            name=product_data.name,
            brand=product_data.brand,
            purchase_price=product_data.purchase_price,
            current_price=product_data.current_price,
            quality=product_data.quality,
            urgency=product_data.urgency,
            photo_path=product_data.photo_path,
        )
        self.db.add(product)
        self._commit("creating product")
        self.db.refresh(product)
        logger.info(f"Product #{product.id} '{product.name}' created")
        return product

    def get_by_id(self, product_id: int) -> Product:
        """
        Get a product by ID.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def get_all(
        self,
        category: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> List[Product]:
        """
        List products, newest first.

        Args:
            category: Optional category filter
            page: Page number (1-indexed); all products when omitted
            page_size: Number of items per page

        Returns:
            List of products
        """
        query = self.db.query(Product)

        if category:
            query = query.filter(Product.category == category)

        query = query.order_by(Product.id.desc())

        if page is not None and page_size:
            query = query.offset((page - 1) * page_size).limit(page_size)

        return query.all()

    def count(self, category: Optional[str] = None) -> int:
        """Count products, optionally restricted to one category."""
        query = self.db.query(Product)
        if category:
            query = query.filter(Product.category == category)
        return query.count()

    def update(self, product_id: int, product_data: ProductUpdate) -> Product:
        """
        Replace the mutable fields of a product.

        The photo path is only replaced when a new one is supplied.
        The suggested price is left alone.

        Args:
            product_id: ID of product to update
            product_data: Full product data

        Returns:
            Updated product

        Raises:
            ProductNotFoundError: If the product doesn't exist
            ValidationError: If the row violates a table constraint
        """
        product = self.get_by_id(product_id)

        for field in MUTABLE_FIELDS:
            setattr(product, field, getattr(product_data, field))

        if product_data.photo_path:
            product.photo_path = product_data.photo_path

        self._commit(f"updating product #{product_id}")
        self.db.refresh(product)
        logger.info(f"Product #{product_id} updated")
        return product

    def set_suggested_price(self, product: Product, suggested_price: float) -> None:
        """Stage a new suggested price. The caller commits."""
        product.suggested_price = suggested_price
        self.db.flush()

    def delete(self, product_id: int) -> None:
        """
        Delete a product.

        Price history rows are not removed here; use
        InventoryService.delete_product for the full workflow.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        product = self.get_by_id(product_id)
        self.db.delete(product)
        self._commit(f"deleting product #{product_id}")
        logger.info(f"Product #{product_id} deleted")

    def search_by_name_prefix(self, term: Optional[str]) -> List[Product]:
        """
        Find products whose folded name starts with the folded term.

        Folding lower-cases and strips accents from vowels, so "el" matches
        both "Elote" and "Él".

        Raises:
            ValidationError: If the trimmed term is shorter than 2 characters
        """
        term = (term or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            raise ValidationError("Search term too short", field="q")

        folded = fold_text(term)
        return (
            self.db.query(Product)
            .filter(fold_column(Product.name).startswith(folded, autoescape=True))
            .order_by(Product.name)
            .all()
        )

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Constraint violated while {action}: {e.orig}")
            raise ValidationError(f"Invalid product data: {e.orig}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error while {action}: {e}")
            raise StorageError(f"Database error while {action}") from e
