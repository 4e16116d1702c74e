"""
Example sales tools backed by a small in-memory product catalog.

Used by the sample swarm in ``config/swarm.yaml``.
"""

import logging
from typing import Optional

from .registry import param, tool

logger = logging.getLogger(__name__)

CATEGORIES = ("laptop", "monitor", "accessory")

PRODUCTS = [
    {"id": "lp-100", "name": "Aero 13", "category": "laptop", "price": 649.0},
    {"id": "lp-200", "name": "Aero 15 Pro", "category": "laptop", "price": 1199.0},
    {"id": "lp-300", "name": "Workhorse 14", "category": "laptop", "price": 899.0},
    {"id": "mn-100", "name": "ClearView 24", "category": "monitor", "price": 179.0},
    {"id": "mn-200", "name": "ClearView 27 QHD", "category": "monitor", "price": 329.0},
    {"id": "ac-100", "name": "Travel Dock", "category": "accessory", "price": 89.0},
]

WARRANTIES = {
    "basic": "12 months parts and labour, return to base.",
    "extended": "36 months parts and labour, next-business-day on-site repair.",
}


@tool(
    description="Search the product catalog by category, optionally capped by price.",
    parameters=[
        param("category", "string", "Product category", enum=CATEGORIES),
        param("max_price", "number", "Highest acceptable unit price"),
    ],
)
def search_products(category: str, max_price: Optional[float] = None) -> str:
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category: {category}")

    matches = [p for p in PRODUCTS if p["category"] == category]
    if max_price is not None:
        matches = [p for p in matches if p["price"] <= float(max_price)]

    logger.debug(f"search_products({category}, {max_price}) -> {len(matches)} matches")
    if not matches:
        return f"No {category} products found."
    return "\n".join(f"{p['id']}: {p['name']} - ${p['price']:.2f}" for p in matches)


@tool(
    description="Calculate a price quote for a quantity of units with an optional discount.",
    parameters=[
        param("price", "number", "Unit price"),
        param("quantity", "number", "Number of units"),
        param("discount_percent", "number", "Discount in percent, 0-100"),
    ],
)
def calculate_quote(price: float, quantity: float, discount_percent: float = 0) -> str:
    discount = float(discount_percent)
    if not 0 <= discount <= 100:
        raise ValueError(f"Discount out of range: {discount}")

    subtotal = float(price) * float(quantity)
    total = subtotal * (1 - discount / 100)
    return f"Subtotal ${subtotal:.2f}, discount {discount:g}%, total ${total:.2f}"


def lookup_warranty(product_id, tier="basic"):
    """
    @description Look up the warranty terms offered with a product.
    @param {string} product_id - Catalog identifier of the product
    @param {string} tier - Coverage tier @enum ["basic", "extended"]
    """
    product = next((p for p in PRODUCTS if p["id"] == product_id), None)
    if product is None:
        raise KeyError(product_id)
    return f"{product['name']}: {WARRANTIES[tier]}"
