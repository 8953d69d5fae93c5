from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.dependencies import get_registry, get_shopper_session
from storefront.models.schemas import CreateSessionResponse, SessionInfo
from storefront.services.sessions import SessionNotFoundError, SessionRegistry, ShopperSession

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("", response_model=CreateSessionResponse, status_code=201)
async def create_new_session(registry: SessionRegistry = Depends(get_registry)):
    session = registry.create()
    return CreateSessionResponse(session_id=session.id)


@router.get("", response_model=list[SessionInfo])
async def list_all_sessions(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    registry: SessionRegistry = Depends(get_registry),
):
    return [s.info() for s in registry.list_sessions(limit=limit, offset=offset)]


@router.get("/{session_id}", response_model=SessionInfo)
async def get_session_detail(session: ShopperSession = Depends(get_shopper_session)):
    return session.info()


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
):
    try:
        registry.end(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
