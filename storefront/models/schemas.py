from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# --- Catalog schemas ---

class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    subcategories: list["Category"] | None = None


class Product(BaseModel):
    """A catalog entry. Static reference data, never mutated after startup."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: float
    prices: dict[str, float] | None = None
    image_url: str
    images: list[str] | None = None
    sizes: list[str] | None = None
    description: str | None = None
    category: str
    subcategory: str | None = None
    tag: Literal["New", "Bestseller"] | None = None
    # Lead image per size; the remaining entries of ``images`` form the gallery.
    size_images: dict[str, str] | None = None


class ProductDetail(BaseModel):
    product: Product
    selected_size: str | None = None
    unit_price: float
    display_price: str
    display_images: list[str]


# --- Cart schemas ---

class CartLineItem(BaseModel):
    id: str
    product: Product
    quantity: int = Field(default=1, ge=1)
    size: str | None = None


class AddToCartRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    size: str | None = None


class UpdateQuantityRequest(BaseModel):
    quantity: int


class CartLineView(BaseModel):
    id: str
    product_id: int
    name: str
    image_url: str
    size: str | None = None
    quantity: int
    unit_price: float
    line_total: float
    display_total: str


class CartView(BaseModel):
    items: list[CartLineView]
    item_count: int
    subtotal: float
    display_subtotal: str


# --- Checkout schemas ---

class CouponRequest(BaseModel):
    code: str = ""


class CheckoutSummary(BaseModel):
    items: list[CartLineView]
    subtotal: float
    delivery_charge: float
    discount: float
    total: float
    coupon_code: str | None = None


class ShippingDetails(BaseModel):
    email: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    mobile: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)


class OrderConfirmation(BaseModel):
    status: Literal["received"] = "received"
    shipping: ShippingDetails
    summary: CheckoutSummary


# --- Auth schemas ---

class User(BaseModel):
    name: str
    email: str


class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""
    name: str | None = None


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


# --- Session schemas ---

class CreateSessionResponse(BaseModel):
    session_id: str


class SessionInfo(BaseModel):
    session_id: str
    created_at: str
    last_active: str
    item_count: int
    user: User | None = None


# --- Assistant schemas ---

class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    text: str


class ChatRequest(BaseModel):
    message: str


class TranscriptResponse(BaseModel):
    messages: list[ChatMessage]
    is_loading: bool


# --- Image search schemas ---

class ImageSearchView(BaseModel):
    state: Literal["idle", "image_selected", "searching", "results", "error"]
    has_image: bool
    mime_type: str | None = None
    error: str | None = None
    results: list[Product] = []
