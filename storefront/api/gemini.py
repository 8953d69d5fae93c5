import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from storefront.dependencies import get_gemini_client
from storefront.services.gemini import GeminiClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["gemini"])


@router.post("/gemini")
async def gemini_proxy(request: Request, client: GeminiClient = Depends(get_gemini_client)):
    """Forward ``{model, contents, config}`` upstream with the server-held key.

    The provider's JSON comes back unmodified.
    """
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")

    model = body.get("model") if isinstance(body, dict) else None
    contents = body.get("contents") if isinstance(body, dict) else None
    if not model or not contents:
        raise HTTPException(status_code=400, detail="Missing model or contents in request body")

    try:
        result = await client.generate_content(model, contents, body.get("config"))
    except Exception:
        logger.exception("Gemini proxy call failed")
        raise HTTPException(status_code=500, detail="Internal Server Error")
    return JSONResponse(result)
