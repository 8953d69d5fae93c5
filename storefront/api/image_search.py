from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from storefront.config import Settings
from storefront.dependencies import get_settings, get_shopper_session
from storefront.models.schemas import ImageSearchView
from storefront.services.sessions import ShopperSession

router = APIRouter(prefix="/api/sessions/{session_id}/image-search", tags=["image-search"])


@router.get("", response_model=ImageSearchView)
async def get_state(session: ShopperSession = Depends(get_shopper_session)):
    return session.image_search.view()


@router.post("/image", response_model=ImageSearchView)
async def select_image(
    file: UploadFile = File(...),
    session: ShopperSession = Depends(get_shopper_session),
    settings: Settings = Depends(get_settings),
):
    if file.size is not None and file.size > settings.MAX_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="Image too large")
    content = await file.read(settings.MAX_IMAGE_BYTES + 1)
    if len(content) > settings.MAX_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="Image too large")
    # Non-image uploads are ignored and leave the current state untouched.
    session.image_search.select_image(content, file.content_type)
    return session.image_search.view()


@router.post("/search", response_model=ImageSearchView)
async def search(session: ShopperSession = Depends(get_shopper_session)):
    if session.image_search.image is None:
        raise HTTPException(status_code=400, detail="Select an image first")
    await session.image_search.search()
    return session.image_search.view()


@router.post("/close", response_model=ImageSearchView)
async def close(session: ShopperSession = Depends(get_shopper_session)):
    session.image_search.close()
    return session.image_search.view()
