"""Tests for the product store."""
import pytest

from pricetracker.exceptions import ProductNotFoundError, ValidationError
from pricetracker.schemas.product import ProductCreate, ProductUpdate
from pricetracker.services.product_service import ProductService


def test_create_then_get_returns_same_fields(db_session, product_payload):
    """Test a created product reads back with an assigned ID."""
    service = ProductService(db_session)

    created = service.create(ProductCreate(**product_payload))
    fetched = service.get_by_id(created.id)

    assert fetched.id == created.id
    for field, value in product_payload.items():
        assert getattr(fetched, field) == value
    assert fetched.suggested_price is None


def test_create_rejects_category_outside_enum(db_session, product_payload):
    """Test the table constraint rejects categories the schema didn't check."""
    service = ProductService(db_session)
    unchecked = ProductCreate.model_construct(**{**product_payload, "category": "Toys"})

    with pytest.raises(ValidationError):
        service.create(unchecked)

    assert service.count() == 0


def test_create_rejects_quality_outside_enum(db_session, product_payload):
    """Test the table constraint rejects qualities the schema didn't check."""
    service = ProductService(db_session)
    unchecked = ProductCreate.model_construct(**{**product_payload, "quality": "great"})

    with pytest.raises(ValidationError):
        service.create(unchecked)


def test_get_missing_product(db_session):
    """Test a missing product raises NotFound with its ID."""
    with pytest.raises(ProductNotFoundError) as exc_info:
        ProductService(db_session).get_by_id(42)

    assert exc_info.value.product_id == 42


def test_get_all_filters_by_category(db_session, make_product):
    """Test the category filter and newest-first ordering."""
    make_product(name="Apple", category="Fruit/Vegetable")
    make_product(name="Water", category="Beverage")
    make_product(name="Pear", category="Fruit/Vegetable")

    products = ProductService(db_session).get_all(category="Fruit/Vegetable")

    assert [p.name for p in products] == ["Pear", "Apple"]


def test_update_keeps_photo_and_suggested_price(db_session, make_product):
    """Test an update without a photo keeps the old photo and suggestion."""
    product = make_product(photo_path="/uploads/bread.jpg", suggested_price=1.35)
    service = ProductService(db_session)

    updated = service.update(
        product.id,
        ProductUpdate(
            category="Food",
            name="Rye Bread",
            brand="Bakery",
            purchase_price=0.90,
            current_price=1.25,
            quality="high",
            urgency="medium",
        )
    )

    assert updated.name == "Rye Bread"
    assert updated.purchase_price == 0.90
    assert updated.current_price == 1.25
    assert updated.quality == "high"
    assert updated.urgency == "medium"
    assert updated.photo_path == "/uploads/bread.jpg"
    assert updated.suggested_price == 1.35


def test_update_missing_product(db_session, product_payload):
    """Test updating a missing product raises NotFound."""
    with pytest.raises(ProductNotFoundError):
        ProductService(db_session).update(7, ProductUpdate(**product_payload))


def test_delete_then_get_raises_not_found(db_session, make_product):
    """Test a deleted product can no longer be read."""
    product = make_product()
    service = ProductService(db_session)

    service.delete(product.id)

    with pytest.raises(ProductNotFoundError):
        service.get_by_id(product.id)


def test_delete_missing_product(db_session):
    """Test deleting a missing product raises NotFound."""
    with pytest.raises(ProductNotFoundError):
        ProductService(db_session).delete(99)


def test_search_folds_case_and_accents(db_session, make_product):
    """Test names are matched after lower-casing and removing accents."""
    make_product(name="Elote")
    make_product(name="élite cola")
    make_product(name="ÉLAN water")
    make_product(name="Melon")

    products = ProductService(db_session).search_by_name_prefix("el")

    assert [p.name for p in products] == ["Elote", "ÉLAN water", "élite cola"]


def test_search_trims_term(db_session, make_product):
    """Test surrounding whitespace is ignored."""
    make_product(name="Melon")

    products = ProductService(db_session).search_by_name_prefix("  me  ")

    assert [p.name for p in products] == ["Melon"]


def test_search_treats_wildcards_literally(db_session, make_product):
    """Test LIKE wildcards in the term match only themselves."""
    make_product(name="50% cocoa")
    make_product(name="500 g rice")

    products = ProductService(db_session).search_by_name_prefix("50%")

    assert [p.name for p in products] == ["50% cocoa"]


@pytest.mark.parametrize("term", [None, "", "a", " b "])
def test_search_rejects_short_terms(db_session, term):
    """Test terms shorter than 2 characters are rejected."""
    with pytest.raises(ValidationError):
        ProductService(db_session).search_by_name_prefix(term)


@pytest.mark.parametrize("name, term", [
    ("Ñoquis", "Ño"),
    ("Ñoquis", "ño"),
    ("Crème fraîche", "crè"),
    ("Crème fraîche", "CRE"),
    ("Über cola", "üb"),
])
def test_search_matches_name_by_its_own_prefix(db_session, make_product, name, term):
    """Test names with ñ, è or ü are found by their own prefix."""
    make_product(name=name)

    products = ProductService(db_session).search_by_name_prefix(term)

    assert [p.name for p in products] == [name]
