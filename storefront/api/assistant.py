from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import StreamingResponse

from storefront.dependencies import get_shopper_session
from storefront.models.schemas import ChatRequest, TranscriptResponse
from storefront.services.assistant import AssistantBusyError
from storefront.services.sessions import ShopperSession

router = APIRouter(prefix="/api/sessions/{session_id}/assistant", tags=["assistant"])


def transcript(session: ShopperSession) -> TranscriptResponse:
    return TranscriptResponse(
        messages=session.assistant.transcript,
        is_loading=session.assistant.is_loading,
    )


@router.get("", response_model=TranscriptResponse)
async def get_transcript(session: ShopperSession = Depends(get_shopper_session)):
    return transcript(session)


@router.post("/open", response_model=TranscriptResponse)
async def open_chat(session: ShopperSession = Depends(get_shopper_session)):
    session.assistant.open()
    return transcript(session)


@router.post("/messages", response_model=TranscriptResponse)
async def send_message(payload: ChatRequest, session: ShopperSession = Depends(get_shopper_session)):
    try:
        await session.assistant.send(payload.message)
    except AssistantBusyError:
        raise HTTPException(status_code=409, detail="A reply is already being generated")
    return transcript(session)


@router.post("/stream")
async def stream_message(payload: ChatRequest, session: ShopperSession = Depends(get_shopper_session)):
    try:
        deltas = session.assistant.stream(payload.message)
    except AssistantBusyError:
        raise HTTPException(status_code=409, detail="A reply is already being generated")
    if deltas is None:
        return Response(status_code=204)
    return StreamingResponse(deltas, media_type="text/plain; charset=utf-8")
