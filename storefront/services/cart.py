"""In-memory cart ledger.

Line items are keyed by product id plus optional size. Every operation is
total: unknown line ids are ignored and quantities never drop below one.
"""

from storefront.models.schemas import CartLineItem, Product
from storefront.services.pricing import line_total


def line_id(product_id: int, size: str | None = None) -> str:
    return f"{product_id}-{size}" if size else str(product_id)


class CartLedger:
    def __init__(self):
        self._items: list[CartLineItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def _find(self, item_id: str) -> CartLineItem | None:
        return next((item for item in self._items if item.id == item_id), None)

    # -- Mutations --

    def add(self, product: Product, quantity: int = 1, size: str | None = None) -> CartLineItem:
        """Add ``quantity`` of a product, merging into an existing line with the same key.

        The resulting line quantity is clamped to at least one.
        """
        item_id = line_id(product.id, size)
        existing = self._find(item_id)
        if existing is not None:
            existing.quantity = max(1, existing.quantity + quantity)
            return existing
        item = CartLineItem(id=item_id, product=product, quantity=max(1, quantity), size=size)
        self._items.append(item)
        return item

    def set_quantity(self, item_id: str, new_quantity: int) -> CartLineItem | None:
        item = self._find(item_id)
        if item is not None:
            item.quantity = max(1, new_quantity)
        return item

    def increment(self, item_id: str) -> CartLineItem | None:
        item = self._find(item_id)
        return self.set_quantity(item_id, item.quantity + 1) if item else None

    def decrement(self, item_id: str) -> CartLineItem | None:
        item = self._find(item_id)
        return self.set_quantity(item_id, item.quantity - 1) if item else None

    def remove(self, item_id: str) -> None:
        self._items = [item for item in self._items if item.id != item_id]

    # -- Reads --

    def line_items(self) -> list[CartLineItem]:
        return list(self._items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def subtotal(self) -> float:
        return sum((line_total(item.product, item.quantity, item.size) for item in self._items), 0.0)
