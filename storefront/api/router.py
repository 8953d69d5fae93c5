from fastapi import APIRouter

from storefront.api.assistant import router as assistant_router
from storefront.api.auth import router as auth_router
from storefront.api.cart import router as cart_router
from storefront.api.catalog import router as catalog_router
from storefront.api.checkout import router as checkout_router
from storefront.api.gemini import router as gemini_router
from storefront.api.image_search import router as image_search_router
from storefront.api.sessions import router as sessions_router

router = APIRouter()
router.include_router(sessions_router)
router.include_router(catalog_router)
router.include_router(cart_router)
router.include_router(checkout_router)
router.include_router(auth_router)
router.include_router(assistant_router)
router.include_router(image_search_router)
router.include_router(gemini_router)
