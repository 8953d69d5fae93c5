from fastapi import APIRouter, Depends, HTTPException

from storefront.dependencies import get_shopper_session
from storefront.models.schemas import RegisterRequest, SignInRequest, User
from storefront.services import auth
from storefront.services.sessions import ShopperSession

router = APIRouter(prefix="/api/sessions/{session_id}/auth", tags=["auth"])


@router.post("/sign-in", response_model=User)
async def sign_in(payload: SignInRequest, session: ShopperSession = Depends(get_shopper_session)):
    try:
        session.user = auth.sign_in(payload.email, payload.password, payload.name)
    except auth.AuthError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return session.user


@router.post("/register", response_model=User, status_code=201)
async def register(payload: RegisterRequest, session: ShopperSession = Depends(get_shopper_session)):
    try:
        session.user = auth.register(payload.name, payload.email, payload.password)
    except auth.AuthError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return session.user


@router.post("/sign-out", status_code=204)
async def sign_out(session: ShopperSession = Depends(get_shopper_session)):
    session.user = None


@router.get("/me", response_model=User)
async def current_user(session: ShopperSession = Depends(get_shopper_session)):
    if session.user is None:
        raise HTTPException(status_code=404, detail="Not signed in")
    return session.user
