"""Test data factories and API response envelopes.

PATTERN: Seedable generator instance so data sets are reproducible
CRITICAL: Overrides are applied last and always win
"""

import logging
import random
import string
import uuid
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "Ada", "Alan", "Grace", "Linus", "Margaret", "Dennis", "Barbara",
    "Ken", "Frances", "Tim", "Radia", "Guido", "Katherine", "John",
]
LAST_NAMES = [
    "Lovelace", "Turing", "Hopper", "Torvalds", "Hamilton", "Ritchie",
    "Liskov", "Thompson", "Allen", "Berners-Lee", "Perlman", "Rossum",
    "Johnson", "McCarthy",
]
CITIES = [
    ("Springfield", "IL", "62701"),
    ("Portland", "OR", "97201"),
    ("Austin", "TX", "73301"),
    ("Madison", "WI", "53703"),
    ("Boulder", "CO", "80302"),
]
STREETS = ["Main St", "Oak Ave", "Maple Dr", "Cedar Ln", "Elm St", "Pine Rd"]
PRODUCT_ADJECTIVES = ["Ergonomic", "Rustic", "Sleek", "Handmade", "Practical", "Refined"]
PRODUCT_MATERIALS = ["Steel", "Wooden", "Cotton", "Granite", "Plastic", "Bronze"]
PRODUCT_NOUNS = ["Chair", "Keyboard", "Lamp", "Table", "Backpack", "Mug"]
DEPARTMENTS = ["Electronics", "Clothing", "Books", "Home", "Sports", "Toys"]
TAGS = ["electronics", "clothing", "books", "home", "sports", "toys"]
ORDER_STATUSES = ["pending", "processing", "shipped", "delivered", "cancelled"]
PAYMENT_METHODS = ["credit_card", "debit_card", "paypal", "apple_pay"]

TAX_RATE = 0.08
SHIPPING_COST = 9.99


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_api_response(
    data: Any,
    meta: Optional[Dict[str, Any]] = None,
    message: str = "Request successful",
) -> Dict[str, Any]:
    """Wrap data in the standard success envelope.

    Args:
        data: Payload placed under ``data``
        meta: Metadata merged over the default page/limit/total
        message: Human readable message

    Returns:
        Envelope dictionary
    """
    return {
        "success": True,
        "data": data,
        "message": message,
        "timestamp": _now_iso(),
        "meta": {
            "page": 1,
            "limit": 10,
            "total": len(data) if isinstance(data, list) else 1,
            **(meta or {}),
        },
    }


def create_error_response(message: str = "An error occurred", code: int = 400) -> Dict[str, Any]:
    """Build the standard error envelope.

    Args:
        message: Error message
        code: HTTP status code reported in the payload

    Returns:
        Envelope dictionary
    """
    try:
        details = HTTPStatus(code).phrase
    except ValueError:
        details = "Unknown error"

    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "timestamp": _now_iso(),
            "details": details,
        },
    }


class DataFactory:
    """Generate realistic users, products, orders and credentials.

    Example:
        factory = DataFactory(seed=42)
        admin = factory.create_user(role="admin")
        products = factory.create_multiple(factory.create_product, 5)
    """

    def __init__(self, seed: Optional[int] = None):
        """Initialize the factory.

        Args:
            seed: Optional seed for reproducible data
        """
        self.seed = seed
        self.random = random.Random(seed)

    def _id(self, high: int = 10000) -> int:
        return self.random.randint(1, high)

    def _token(self, length: int, alphabet: str = string.ascii_uppercase + string.digits) -> str:
        return "".join(self.random.choice(alphabet) for _ in range(length))

    def _password(self, length: int = 12) -> str:
        return self._token(length, string.ascii_letters + string.digits + "!@#$%")

    def _recent(self, days: int = 30) -> str:
        moment = datetime.now(timezone.utc) - timedelta(
            seconds=self.random.randint(0, days * 24 * 3600)
        )
        return moment.isoformat()

    def _address(self) -> Dict[str, str]:
        city, state, zip_code = self.random.choice(CITIES)
        return {
            "street": f"{self.random.randint(1, 9999)} {self.random.choice(STREETS)}",
            "city": city,
            "state": state,
            "zipCode": zip_code,
            "country": "United States",
        }

    def create_user(self, **overrides: Any) -> Dict[str, Any]:
        """Generate a user record."""
        first = self.random.choice(FIRST_NAMES)
        last = self.random.choice(LAST_NAMES)
        handle = f"{first}.{last}{self.random.randint(1, 999)}".lower()
        birth = datetime(1950, 1, 1) + timedelta(days=self.random.randint(0, 365 * 50))

        user = {
            "id": self._id(),
            "firstName": first,
            "lastName": last,
            "email": f"{handle}@example.com",
            "username": handle.replace(".", "_"),
            "password": self._password(),
            "phone": f"+1-555-{self.random.randint(100, 999)}-{self.random.randint(1000, 9999)}",
            "address": self._address(),
            "dateOfBirth": birth.date().isoformat(),
            "isActive": True,
            "role": "user",
            "createdAt": self._recent(),
            "updatedAt": self._recent(),
        }
        user.update(overrides)
        return user

    def create_product(self, **overrides: Any) -> Dict[str, Any]:
        """Generate a product record."""
        name = (
            f"{self.random.choice(PRODUCT_ADJECTIVES)} "
            f"{self.random.choice(PRODUCT_MATERIALS)} "
            f"{self.random.choice(PRODUCT_NOUNS)}"
        )
        product = {
            "id": self._id(),
            "name": name,
            "description": f"A {name.lower()} built for everyday use.",
            "price": round(self.random.uniform(1, 1000), 2),
            "category": self.random.choice(DEPARTMENTS),
            "sku": self._token(8),
            "inStock": self.random.random() < 0.5,
            "quantity": self.random.randint(0, 100),
            "brand": f"{self.random.choice(LAST_NAMES)} Co",
            "tags": self.random.sample(TAGS, self.random.randint(1, 3)),
            "createdAt": self._recent(),
            "updatedAt": self._recent(),
        }
        product.update(overrides)
        return product

    def create_order(self, **overrides: Any) -> Dict[str, Any]:
        """Generate an order with 1-3 products and computed totals."""
        items = [self.create_product() for _ in range(self.random.randint(1, 3))]
        subtotal = sum(item["price"] for item in items)
        tax = subtotal * TAX_RATE

        order = {
            "id": self._id(),
            "orderNumber": self._token(10),
            "userId": self._id(1000),
            "status": self.random.choice(ORDER_STATUSES),
            "items": items,
            "subtotal": round(subtotal, 2),
            "tax": round(tax, 2),
            "shipping": SHIPPING_COST,
            "total": round(subtotal + tax + SHIPPING_COST, 2),
            "shippingAddress": self._address(),
            "paymentMethod": self.random.choice(PAYMENT_METHODS),
            "createdAt": self._recent(),
            "updatedAt": self._recent(),
        }
        order.update(overrides)
        return order

    def create_auth_credentials(self, **overrides: Any) -> Dict[str, Any]:
        """Generate login / registration credentials."""
        handle = f"user_{uuid.UUID(int=self.random.getrandbits(128)).hex[:8]}"
        credentials = {
            "username": handle,
            "email": f"{handle}@example.com",
            "password": self._password(),
            "confirmPassword": self._password(),
        }
        credentials.update(overrides)
        return credentials

    def create_multiple(
        self,
        factory_method: Callable[..., Dict[str, Any]],
        count: int = 5,
        **overrides: Any,
    ) -> List[Dict[str, Any]]:
        """Generate ``count`` records with a factory method.

        Args:
            factory_method: Bound factory method such as ``create_user``
            count: Number of records
            **overrides: Overrides applied to every record

        Returns:
            List of generated records
        """
        return [factory_method(**overrides) for _ in range(count)]

    def create_test_data_set(self) -> Dict[str, Any]:
        """Generate a linked data set for data-driven tests."""
        data_set = {
            "users": self.create_multiple(self.create_user, 10),
            "products": self.create_multiple(self.create_product, 20),
            "orders": self.create_multiple(self.create_order, 15),
            "adminUser": self.create_user(role="admin", isActive=True),
            "testUser": self.create_user(
                email="test@example.com",
                username="testuser",
                password="TestPassword123!",
            ),
        }
        logger.debug(
            f"Generated data set (seed={self.seed}): "
            f"{len(data_set['users'])} users, {len(data_set['products'])} products, "
            f"{len(data_set['orders'])} orders"
        )
        return data_set
