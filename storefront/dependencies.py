from fastapi import Depends, HTTPException, Request

from storefront.config import Settings, settings
from storefront.services.gemini import GeminiClient
from storefront.services.sessions import SessionNotFoundError, SessionRegistry, ShopperSession


def get_settings() -> Settings:
    return settings


def get_gemini_client(request: Request) -> GeminiClient:
    """The process-wide Gemini client created at startup."""
    return request.app.state.gemini


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_shopper_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> ShopperSession:
    """Resolve the ``{session_id}`` path parameter, 404 when unknown."""
    try:
        session = registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    session.touch()
    return session
