from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import math

from pricetracker.config import get_settings
from pricetracker.database import get_db
from pricetracker.exceptions import (
    InvalidSuggestionError,
    OracleUnavailableError,
    ProductNotFoundError,
    StorageError,
    ValidationError,
)
from pricetracker.models.product import Category
from pricetracker.services.inventory_service import InventoryService
from pricetracker.services.price_history_service import PriceHistoryService
from pricetracker.services.pricing_advisor import PricingAdvisor
from pricetracker.services.product_service import ProductService
from pricetracker.schemas.price_history import PriceHistoryResponse
from pricetracker.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductDetailResponse,
    ProductListResponse
)

router = APIRouter(prefix="/products", tags=["Products"])


def get_pricing_advisor() -> PricingAdvisor:
    """Dependency returning a pricing oracle client built from settings."""
    return PricingAdvisor()


def _not_found(e: ProductNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _storage_failed(e: StorageError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post(
    "/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product with its category, prices, quality and urgency."
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **category**: Fruit/Vegetable, Beverage, Food or Other (required)
    - **name** / **brand**: Non-empty text (required)
    - **purchase_price**: Must be positive (required)
    - **current_price**: Current selling price (optional)
    - **quality**: high, medium or low (required)
    - **urgency**: very high, medium or low (required)
    - **photo_path**: Path of an already stored photo (optional)
    """
    service = ProductService(db)
    try:
        return service.create(product_data)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        raise _storage_failed(e)


@router.get(
    "/",
    response_model=ProductListResponse,
    summary="List all products",
    description="Get a paginated list of products, newest first, with optional category filter."
)
def list_products(
    category: Optional[Category] = Query(None, description="Filter by category"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: Optional[int] = Query(None, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db)
):
    """Get paginated list of products."""
    service = ProductService(db)
    category_value = category.value if category else None
    page_size = page_size or get_settings().DEFAULT_PAGE_SIZE

    total = service.count(category_value)
    total_pages = math.ceil(total / page_size) if total > 0 else 1
    products = service.get_all(category_value, page, page_size)

    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages
    )


@router.get(
    "/search",
    response_model=list[ProductResponse],
    summary="Search products by name",
    description="Find products whose name starts with the term, ignoring case and accents."
)
def search_products(
    q: Optional[str] = Query(None, description="Name prefix, at least 2 characters"),
    db: Session = Depends(get_db)
):
    """Prefix search on accent-folded product names, alphabetical."""
    service = ProductService(db)
    try:
        return service.search_by_name_prefix(q)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    summary="Get product by ID",
    description="Get a product together with its price history, newest first."
)
def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Get a product and its price history."""
    service = InventoryService(db)
    try:
        product, history = service.get_product_with_history(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)

    return ProductDetailResponse(
        **ProductResponse.model_validate(product).model_dump(),
        history=[PriceHistoryResponse.model_validate(h) for h in history]
    )


@router.get(
    "/{product_id}/history",
    response_model=list[PriceHistoryResponse],
    summary="Get price history",
    description="Get the price history of a product, newest first."
)
def get_product_history(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Get the price history of a product."""
    try:
        ProductService(db).get_by_id(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)

    return PriceHistoryService(db).list_for_product(product_id)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Replace product details. The photo is kept when no new photo path is given."
)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a product.

    All mutable fields are replaced. The suggested price can only be
    changed by the price computation.
    """
    service = ProductService(db)
    try:
        return service.update(product_id, product_data)
    except ProductNotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        raise _storage_failed(e)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Delete a product by ID. Its price history is deleted first."
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Delete a product and its price history."""
    service = InventoryService(db)
    try:
        service.delete_product(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)
    except StorageError as e:
        raise _storage_failed(e)

    return None


@router.post(
    "/{product_id}/suggested-price",
    response_model=ProductResponse,
    summary="Compute suggested price",
    description="""
    Ask the pricing oracle for a suggested selling price.

    On success a price history entry is recorded and the product's
    suggested price is updated, in one transaction. On failure nothing
    is written.
    """
)
def compute_suggested_price(
    product_id: int,
    db: Session = Depends(get_db),
    advisor: PricingAdvisor = Depends(get_pricing_advisor)
):
    """Compute and store a suggested price for a product."""
    service = InventoryService(db, advisor=advisor)
    try:
        return service.compute_suggested_price(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)
    except InvalidSuggestionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except OracleUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except StorageError as e:
        raise _storage_failed(e)
