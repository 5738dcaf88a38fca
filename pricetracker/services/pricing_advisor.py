import logging
import math
import re
from typing import Optional

import requests

from pricetracker.config import get_settings
from pricetracker.exceptions import InvalidSuggestionError, OracleUnavailableError
from pricetracker.models.product import Category, Product, Quality, Urgency

logger = logging.getLogger(__name__)

# Leading decimal literal of a reply, e.g. "2.75" or "2,75 EUR".
# Grouped numbers such as "1,234.56" are not prices.
PRICE_PATTERN = re.compile(r"^[-+]?(\d+(?:[.,]\d*)?|[.,]\d+)(?![\d.,])")

CATEGORY_RULES = {
    Category.FRUIT_VEGETABLE: """
**INSTRUCTIONS FOR FRUIT/VEGETABLES:**
1. Always price PER KILO (not per unit)
2. Base margin: 45%-75% over purchase price
3. In high season: reduce 5-10%
4. Close to expiry (high urgency): reduce 10-15%
5. High quality: add 5-8%""",
    Category.BEVERAGE: """
**INSTRUCTIONS FOR BEVERAGES:**
1. Price PER UNIT (unless it is stated to be a pack)
2. Base margin: 20-40%
3. Mineral water: margin 150-300% (based on brand reputation)
4. Store brands: margin 20-40%
5. Soft drinks: margin 25-50%""",
    Category.FOOD: """
**INSTRUCTIONS FOR FOOD:**
1. Perishable: margin 25-75%
2. Non-perishable: margin 50-150%
3. High urgency: reduce 5-10%
4. Premium quality: add 5-10%
5. Local products: add 5-8%""",
    Category.OTHER: """
**INSTRUCTIONS FOR OTHER PRODUCTS:**
1. Base margin: 25-50% (very flexible, use your own judgement)
2. Exclusive products: +10-20%
3. Direct competition: match or reduce 2-5%""",
}

URGENCY_ADJUSTMENTS = {
    Urgency.VERY_HIGH: "- APPLY A DISCOUNT for urgency (5-10%)",
}

QUALITY_ADJUSTMENTS = {
    Quality.HIGH: "- ADD A SURCHARGE for quality (2-5%)",
    Quality.LOW: "- REDUCE THE MARGIN for lower quality (5-10%)",
}

PROMPT_TEMPLATE = """
You are a pricing expert for retail shops. Calculate the optimal selling price for this product following these specific rules:
{rules}

**PRODUCT DATA:**
- Name: {name}
- Brand: {brand}
- Category: {category}
- Purchase price: {purchase_price}€
- Quality: {quality}
- Urgency: {urgency}

**ADDITIONAL FACTORS TO CONSIDER:**
{adjustments}

**REQUIRED FORMAT:**
MOST IMPORTANT: return ONLY the number with 2 decimals. Example: 2.75 NO ANALYSIS, NO REASONING, ONLY A NUMBER WITH TWO DECIMALS AND NO EXTRA TEXT

**CALCULATED SUGGESTED PRICE:**"""


def build_prompt(product: Product) -> str:
    """Build the pricing instruction for a product from its category rules."""
    # Columns hold plain strings; enum members hash by name, not value
    category = Category(product.category)
    quality = Quality(product.quality)
    urgency = Urgency(product.urgency)

    adjustments = [
        URGENCY_ADJUSTMENTS.get(urgency, ""),
        QUALITY_ADJUSTMENTS.get(quality, ""),
    ]
    return PROMPT_TEMPLATE.format(
        rules=CATEGORY_RULES[category],
        name=product.name,
        brand=product.brand,
        category=category.value,
        purchase_price=product.purchase_price,
        quality=quality.value,
        urgency=urgency.value,
        adjustments="\n".join(adjustments),
    )


def parse_price(reply: str) -> float:
    """
    Parse the oracle reply as a two-decimal price.

    Raises:
        InvalidSuggestionError: If the reply doesn't start with a finite
            positive number
    """
    match = PRICE_PATTERN.match(reply.strip())
    if not match:
        raise InvalidSuggestionError(reply)

    value = float(match.group(0).replace(",", "."))
    if not math.isfinite(value) or value <= 0:
        raise InvalidSuggestionError(reply)

    return round(value, 2)


class PricingAdvisor:
    """
    Client for the external pricing oracle (a chat-completion endpoint).

    Each call is a single round trip: no retry, no cache, no rate limit.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.OPENROUTER_API_KEY
        self.api_url = api_url or settings.PRICING_API_URL
        self.model = model or settings.PRICING_MODEL
        self.temperature = temperature if temperature is not None else settings.PRICING_TEMPERATURE
        self.timeout = timeout or settings.PRICING_TIMEOUT

    def suggest_price(self, product: Product) -> float:
        """
        Ask the oracle for a suggested selling price.

        Args:
            product: Product to price

        Returns:
            Suggested price rounded to two decimals

        Raises:
            OracleUnavailableError: Missing credentials, network error,
                non-success status or malformed payload
            InvalidSuggestionError: The reply is not a number
        """
        reply = self._complete(build_prompt(product))
        logger.info(f"Pricing oracle replied '{reply}' for product #{product.id}")
        return parse_price(reply)

    def _complete(self, prompt: str) -> str:
        if not self.api_key:
            raise OracleUnavailableError("Pricing oracle API key is not configured")

        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                self.api_url, json=payload, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            message = f"Pricing oracle request failed: {e}"
            if e.response is not None and e.response.text:
                message = f"{message}: {e.response.text}"
            logger.error(message)
            raise OracleUnavailableError(message) from e
        except ValueError as e:
            logger.error(f"Pricing oracle returned a non-JSON body: {e}")
            raise OracleUnavailableError("Pricing oracle returned a non-JSON body") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected pricing oracle payload: {data}")
            raise OracleUnavailableError("Unexpected pricing oracle payload") from e

        return (content or "").strip()
