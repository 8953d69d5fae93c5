from fastapi import APIRouter, HTTPException, Query

from storefront.models import catalog
from storefront.models.schemas import Category, Product, ProductDetail
from storefront.services.pricing import format_price, unit_price

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/categories", response_model=list[Category])
async def list_categories():
    return catalog.CATEGORIES


@router.get("/products")
async def list_products(category: str = Query(default=catalog.ALL_CATEGORIES)):
    return {
        "title": catalog.category_title(category),
        "products": catalog.filter_products(category),
    }


@router.get("/products/{product_id}", response_model=ProductDetail)
async def get_product_detail(product_id: int, size: str | None = None):
    product = catalog.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    selected = size or catalog.default_size(product)
    price = unit_price(product, selected)
    return ProductDetail(
        product=product,
        selected_size=selected,
        unit_price=price,
        display_price=format_price(price),
        display_images=catalog.display_images(product, selected),
    )


def require_product(product_id: int, size: str | None = None) -> tuple[Product, str | None]:
    """Look up a product for the cart and settle which size is meant."""
    product = catalog.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    if product.sizes:
        size = size or catalog.default_size(product)
        if size not in product.sizes:
            raise HTTPException(status_code=400, detail=f"Unknown size {size!r} for product {product_id}")
    elif size:
        raise HTTPException(status_code=400, detail=f"Product {product_id} has no sizes")
    return product, size
