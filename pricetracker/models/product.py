from sqlalchemy import Column, Integer, String, Float, CheckConstraint
import enum

from pricetracker.database import Base


class Category(str, enum.Enum):
    """Enum for product category."""
    FRUIT_VEGETABLE = "Fruit/Vegetable"
    BEVERAGE = "Beverage"
    FOOD = "Food"
    OTHER = "Other"


class Quality(str, enum.Enum):
    """Enum for product quality."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Urgency(str, enum.Enum):
    """Enum for how urgently a product has to be sold."""
    VERY_HIGH = "very high"
    MEDIUM = "medium"
    LOW = "low"


def _one_of(column: str, values: type[enum.Enum]) -> str:
    allowed = ", ".join(f"'{member.value}'" for member in values)
    return f"{column} IN ({allowed})"


class Product(Base):
    """
    Product model representing an inventory item.

    Attributes:
        id: Unique identifier for the product
        category: One of the Category values
        name: Product name
        brand: Product brand
        purchase_price: What the shop paid (must be positive)
        current_price: Price the product is currently sold at
        quality: One of the Quality values
        urgency: One of the Urgency values
        photo_path: Relative path to a stored image
        suggested_price: Last price suggested by the pricing oracle
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(32), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    brand = Column(String(255), nullable=False)
    purchase_price = Column(Float, nullable=False)
    current_price = Column(Float, nullable=True)
    quality = Column(String(16), nullable=False)
    urgency = Column(String(16), nullable=False)
    photo_path = Column(String(512), nullable=True)
    suggested_price = Column(Float, nullable=True)

    # Enum values are enforced at the storage boundary as well
    __table_args__ = (
        CheckConstraint(_one_of("category", Category), name="check_category_valid"),
        CheckConstraint(_one_of("quality", Quality), name="check_quality_valid"),
        CheckConstraint(_one_of("urgency", Urgency), name="check_urgency_valid"),
        CheckConstraint("purchase_price > 0", name="check_purchase_price_positive"),
        CheckConstraint("length(name) > 0", name="check_name_not_empty"),
        CheckConstraint("length(brand) > 0", name="check_brand_not_empty"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
