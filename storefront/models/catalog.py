"""Static catalog and category taxonomy.

Every other component reads from here; nothing writes to it after import.
"""

import json
import logging

from storefront.models.schemas import Category, Product

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


CATEGORIES: list[Category] = [
    Category(name="Skincare"),
    Category(
        name="Haircare",
        subcategories=[
            Category(name="Shampoo"),
            Category(name="Conditioner"),
            Category(name="Hair Oil"),
        ],
    ),
]


_GLOSS_SHAMPOO_IMAGES = [
    "https://i.imgur.com/n0VRaGV.png",
    "https://i.imgur.com/PzWCPFx.png",
    "https://i.imgur.com/d9QaXvm.png",
    "https://i.imgur.com/GPv367e.png",
    "https://i.imgur.com/R9mYzBf.png",
]

PRODUCTS: list[Product] = [
    Product(id=1, name="Hydrating Facial Cleanser", price=24.99,
            image_url="https://picsum.photos/seed/p1/400/400", category="Skincare", tag="Bestseller"),
    Product(id=2, name="Vitamin C Serum", price=45.0,
            image_url="https://picsum.photos/seed/p2/400/400", category="Skincare", tag="New"),
    Product(id=3, name="Daily Moisturizer SPF 30", price=32.5,
            image_url="https://picsum.photos/seed/p3/400/400", category="Skincare"),
    Product(id=4, name="Restorative Night Cream", price=55.0,
            image_url="https://picsum.photos/seed/p4/400/400", category="Skincare"),
    Product(id=5, name="Volumizing Shampoo", price=28.0,
            image_url="https://picsum.photos/seed/p5/400/400", category="Haircare",
            subcategory="Shampoo", tag="New"),
    Product(id=6, name="Keratin Smooth Shampoo", price=30.0,
            image_url="https://picsum.photos/seed/p6/400/400", category="Haircare",
            subcategory="Shampoo"),
    Product(
        id=13,
        name="Glycolic Gloss Shampoo",
        price=990,
        prices={"440ml": 990, "200ml": 500},
        image_url=_GLOSS_SHAMPOO_IMAGES[0],
        images=_GLOSS_SHAMPOO_IMAGES,
        sizes=["440ml", "200ml"],
        size_images={"440ml": _GLOSS_SHAMPOO_IMAGES[0], "200ml": _GLOSS_SHAMPOO_IMAGES[4]},
        description=(
            "Loreal Paris Glycolic Gloss Shampoo which makes your hair frizz-free & manageable. "
            "Enjoy smooth & glossy hair all day!"
        ),
        category="Haircare",
        subcategory="Shampoo",
        tag="New",
    ),
    Product(id=7, name="Deep Hydration Conditioner", price=28.0,
            image_url="https://picsum.photos/seed/p7/400/400", category="Haircare",
            subcategory="Conditioner"),
    Product(id=8, name="Color Protect Conditioner", price=32.0,
            image_url="https://picsum.photos/seed/p8/400/400", category="Haircare",
            subcategory="Conditioner", tag="Bestseller"),
    Product(id=9, name="Argan Hair Oil", price=35.0,
            image_url="https://picsum.photos/seed/p9/400/400", category="Haircare",
            subcategory="Hair Oil"),
    Product(id=10, name="Rosemary Strengthening Oil", price=25.5,
            image_url="https://picsum.photos/seed/p10/400/400", category="Haircare",
            subcategory="Hair Oil"),
    Product(id=11, name="Gentle Exfoliating Scrub", price=29.99,
            image_url="https://picsum.photos/seed/p11/400/400", category="Skincare"),
    Product(id=12, name="Anti-Dandruff Shampoo", price=27.0,
            image_url="https://picsum.photos/seed/p12/400/400", category="Haircare",
            subcategory="Shampoo"),
]

_PRODUCTS_BY_ID = {product.id: product for product in PRODUCTS}


# --- Lookups ---

def get_product(product_id: int) -> Product | None:
    return _PRODUCTS_BY_ID.get(product_id)


def filter_products(category: str = ALL_CATEGORIES, products: list[Product] | None = None) -> list[Product]:
    """Products whose category or subcategory matches. ``"All"`` returns everything."""
    products = PRODUCTS if products is None else products
    if category == ALL_CATEGORIES:
        return list(products)
    return [p for p in products if p.category == category or p.subcategory == category]


def iter_categories(categories: list[Category] | None = None):
    """Walk top-level categories followed by their subcategories."""
    for category in CATEGORIES if categories is None else categories:
        yield category
        yield from category.subcategories or []


def category_title(category: str) -> str:
    if category == ALL_CATEGORIES:
        return "Our Collection"
    for candidate in iter_categories():
        if candidate.name == category:
            return candidate.name
    return "Products"


# --- Product presentation ---

def default_size(product: Product) -> str | None:
    return product.sizes[0] if product.sizes else None


def display_images(product: Product, size: str | None = None) -> list[str]:
    """Images to show for a product, leading with the selected size's image."""
    images = list(product.images or [product.image_url])
    if not product.size_images or size not in product.size_images:
        return images
    lead_images = set(product.size_images.values())
    gallery = [image for image in images if image not in lead_images]
    return [product.size_images[size], *gallery]


def missing_size_prices(products: list[Product] | None = None) -> list[tuple[int, str]]:
    """(product id, size) pairs listed in ``sizes`` without a ``prices`` entry."""
    missing = []
    for product in PRODUCTS if products is None else products:
        for size in product.sizes or []:
            if size not in (product.prices or {}):
                missing.append((product.id, size))
    return missing


def warn_missing_size_prices(products: list[Product] | None = None) -> list[tuple[int, str]]:
    """Log each unpriced size. Those fall back to the product's base price."""
    missing = missing_size_prices(products)
    for product_id, size in missing:
        logger.warning("Product %d lists size %r without a price; using its base price", product_id, size)
    return missing


# --- Manifests sent to the model ---

def assistant_manifest(products: list[Product] | None = None) -> str:
    return json.dumps([
        {
            "id": p.id,
            "name": p.name,
            "category": p.category,
            "subcategory": p.subcategory,
            "price": p.price,
            "description": p.description,
        }
        for p in (PRODUCTS if products is None else products)
    ])


def visual_manifest(products: list[Product] | None = None) -> str:
    return json.dumps([
        {
            "id": p.id,
            "name": p.name,
            "description": p.description,
            "category": p.category,
            "subcategory": p.subcategory,
        }
        for p in (PRODUCTS if products is None else products)
    ], separators=(",", ":"))
