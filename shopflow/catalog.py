"""Products shown on the listing screen."""
from dataclasses import dataclass
from typing import Iterable, Optional

from shopflow.errors import ERROR_PRODUCT_NOT_FOUND, ProductNotFoundError
from shopflow.services.money import parse_price


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: str
    image: str = ""

    def __post_init__(self):
        # Reject bad prices when the catalog is built, not at checkout
        parse_price(self.price)

    def to_cart_item(self) -> dict:
        """Payload the listing puts in its cart for one unit of this product."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "quantity": 1,
        }

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "price": self.price, "image": self.image}


DEFAULT_PRODUCTS: tuple[Product, ...] = (
    Product(id="1", name="Wireless Headphones", price="$59.99", image="assets/products/headphones.png"),
    Product(id="2", name="Smart Watch", price="$149.00", image="assets/products/smartwatch.png"),
    Product(id="3", name="Bluetooth Speaker", price="$35.50", image="assets/products/speaker.png"),
    Product(id="4", name="Power Bank 20000mAh", price="$24.99", image="assets/products/powerbank.png"),
    Product(id="5", name="USB-C Charger", price="$10.00", image="assets/products/charger.png"),
    Product(id="6", name="Laptop Stand", price="$5.50", image="assets/products/laptop-stand.png"),
)


class Catalog:
    """Read-only product list, in display order."""

    def __init__(self, products: Iterable[Product] = DEFAULT_PRODUCTS):
        self._products = tuple(products)
        self._by_id = {product.id: product for product in self._products}

    def __iter__(self):
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def find(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def get(self, product_id: str) -> Product:
        product = self.find(product_id)
        if product is None:
            raise ProductNotFoundError(ERROR_PRODUCT_NOT_FOUND)
        return product
