from fastapi import APIRouter, Depends

from storefront.dependencies import get_shopper_session
from storefront.models.schemas import CheckoutSummary, CouponRequest, OrderConfirmation, ShippingDetails
from storefront.services.sessions import ShopperSession

router = APIRouter(prefix="/api/sessions/{session_id}/checkout", tags=["checkout"])


@router.get("", response_model=CheckoutSummary)
async def get_summary(session: ShopperSession = Depends(get_shopper_session)):
    return session.checkout.summary()


@router.post("/coupon", response_model=CheckoutSummary)
async def apply_coupon(payload: CouponRequest, session: ShopperSession = Depends(get_shopper_session)):
    # Unknown codes are not an error; they just leave no discount.
    session.checkout.apply_coupon(payload.code)
    return session.checkout.summary()


@router.post("/order", response_model=OrderConfirmation)
async def place_order(shipping: ShippingDetails, session: ShopperSession = Depends(get_shopper_session)):
    return session.checkout.place_order(shipping)
