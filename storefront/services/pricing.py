from storefront.config import settings
from storefront.models.schemas import Product


def unit_price(product: Product, size: str | None = None) -> float:
    """Size-specific price when the product lists one for ``size``, else the base price."""
    if size and product.prices and size in product.prices:
        return product.prices[size]
    return product.price


def line_total(product: Product, quantity: int, size: str | None = None) -> float:
    return unit_price(product, size) * quantity


def format_price(amount: float, symbol: str | None = None) -> str:
    return f"{amount:.2f}{settings.CURRENCY_SYMBOL if symbol is None else symbol}"
