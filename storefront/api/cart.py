from fastapi import APIRouter, Depends

from storefront.api.catalog import require_product
from storefront.dependencies import get_shopper_session
from storefront.models.schemas import AddToCartRequest, CartView, UpdateQuantityRequest
from storefront.services.checkout import line_views
from storefront.services.pricing import format_price
from storefront.services.sessions import ShopperSession

router = APIRouter(prefix="/api/sessions/{session_id}/cart", tags=["cart"])


def cart_view(session: ShopperSession) -> CartView:
    subtotal = session.cart.subtotal
    return CartView(
        items=line_views(session.cart),
        item_count=session.cart.item_count,
        subtotal=round(subtotal, 2),
        display_subtotal=format_price(subtotal),
    )


@router.get("", response_model=CartView)
async def get_cart(session: ShopperSession = Depends(get_shopper_session)):
    return cart_view(session)


@router.post("/items", response_model=CartView, status_code=201)
async def add_item(payload: AddToCartRequest, session: ShopperSession = Depends(get_shopper_session)):
    product, size = require_product(payload.product_id, payload.size)
    session.cart.add(product, payload.quantity, size)
    return cart_view(session)


@router.patch("/items/{line_id}", response_model=CartView)
async def update_item(
    line_id: str,
    payload: UpdateQuantityRequest,
    session: ShopperSession = Depends(get_shopper_session),
):
    session.cart.set_quantity(line_id, payload.quantity)
    return cart_view(session)


@router.post("/items/{line_id}/increment", response_model=CartView)
async def increment_item(line_id: str, session: ShopperSession = Depends(get_shopper_session)):
    session.cart.increment(line_id)
    return cart_view(session)


@router.post("/items/{line_id}/decrement", response_model=CartView)
async def decrement_item(line_id: str, session: ShopperSession = Depends(get_shopper_session)):
    session.cart.decrement(line_id)
    return cart_view(session)


@router.delete("/items/{line_id}", response_model=CartView)
async def remove_item(line_id: str, session: ShopperSession = Depends(get_shopper_session)):
    session.cart.remove(line_id)
    return cart_view(session)
