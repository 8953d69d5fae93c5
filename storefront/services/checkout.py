import logging

from storefront.models.schemas import (
    CartLineView,
    CheckoutSummary,
    OrderConfirmation,
    ShippingDetails,
)
from storefront.services.cart import CartLedger
from storefront.services.pricing import format_price, line_total, unit_price

logger = logging.getLogger(__name__)


def line_views(ledger: CartLedger) -> list[CartLineView]:
    """Flatten ledger lines into display rows with resolved prices."""
    views = []
    for item in ledger.line_items():
        total = line_total(item.product, item.quantity, item.size)
        views.append(CartLineView(
            id=item.id,
            product_id=item.product.id,
            name=item.product.name,
            image_url=item.product.image_url,
            size=item.size,
            quantity=item.quantity,
            unit_price=unit_price(item.product, item.size),
            line_total=total,
            display_total=format_price(total),
        ))
    return views


class CheckoutCalculator:
    """Totals for the checkout view, read from the session's cart ledger."""

    def __init__(self, ledger: CartLedger, delivery_charge: float, coupon_code: str, coupon_rate: float):
        self.ledger = ledger
        self.delivery_charge = delivery_charge
        self.coupon_code = coupon_code
        self.coupon_rate = coupon_rate
        self.applied_code: str | None = None

    @property
    def subtotal(self) -> float:
        return self.ledger.subtotal

    @property
    def discount(self) -> float:
        if self.applied_code is None:
            return 0.0
        return self.subtotal * self.coupon_rate

    @property
    def total(self) -> float:
        return self.subtotal + self.delivery_charge - self.discount

    def apply_coupon(self, code: str) -> float:
        """Apply a coupon code and return the resulting discount.

        An unknown code clears whatever discount was applied before.
        """
        if (code or "").strip().upper() == self.coupon_code.upper():
            self.applied_code = self.coupon_code
        else:
            if self.applied_code is not None:
                logger.info("Coupon %r rejected, clearing previous discount", code)
            self.applied_code = None
        return self.discount

    def summary(self) -> CheckoutSummary:
        return CheckoutSummary(
            items=line_views(self.ledger),
            subtotal=round(self.subtotal, 2),
            delivery_charge=round(self.delivery_charge, 2),
            discount=round(self.discount, 2),
            total=round(self.total, 2),
            coupon_code=self.applied_code,
        )

    def place_order(self, shipping: ShippingDetails) -> OrderConfirmation:
        """Record nothing and charge nothing; echo the order back for confirmation."""
        summary = self.summary()
        logger.info("Order received for %s: %d line(s), total %.2f", shipping.email, len(summary.items), summary.total)
        return OrderConfirmation(shipping=shipping, summary=summary)
