"""Customer chat API endpoints."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from quickorder.api.errors import to_http_exception
from quickorder.core.dependencies import get_chat_session_manager
from quickorder.services.chat.flow import IntakeFlow
from quickorder.services.chat.manager import ChatSessionManager
from quickorder.services.chat.stages import IntakeStage
from quickorder.services.chat.transcript import ChatMessage
from quickorder.services.orders.models import Order, OrderDraft

router = APIRouter()
logger = logging.getLogger(__name__)


class SessionResponse(BaseModel):
    """Chat session state response model."""
    session_id: str
    stage: IntakeStage
    draft: OrderDraft
    awaiting_final_confirmation: bool
    is_bot_typing: bool
    order_id: Optional[int] = None
    messages: List[ChatMessage] = []


class TurnResponse(BaseModel):
    """Result of one chat turn: the messages it added and the resulting state."""
    session: SessionResponse
    messages: List[ChatMessage]
    order: Optional[Order] = None


class MessageRequest(BaseModel):
    """Customer message request model."""
    text: str


def _session_response(flow: IntakeFlow, include_messages: bool = True) -> SessionResponse:
    state = flow.state
    return SessionResponse(
        session_id=state.session_id,
        stage=state.stage,
        draft=state.draft,
        awaiting_final_confirmation=state.awaiting_final_confirmation,
        is_bot_typing=state.is_bot_typing,
        order_id=state.order_id,
        messages=list(flow.transcript.messages) if include_messages else [],
    )


@router.post("/api/chat/sessions", response_model=TurnResponse, status_code=201)
async def create_session(
    request: Request,
    manager: ChatSessionManager = Depends(get_chat_session_manager),
):
    """Open a chat session and get the greeting."""
    logger.info(
        f"[CHAT] New session requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    try:
        flow = await manager.create_session()
        return TurnResponse(
            session=_session_response(flow, include_messages=False),
            messages=list(flow.transcript.messages),
        )
    except Exception as e:
        raise to_http_exception(e, "CHAT")


@router.get("/api/chat/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    manager: ChatSessionManager = Depends(get_chat_session_manager),
):
    """Get the session state and its full transcript."""
    try:
        return _session_response(manager.get_session(session_id))
    except Exception as e:
        raise to_http_exception(e, "CHAT")


@router.get("/api/chat/sessions/{session_id}/messages", response_model=List[ChatMessage])
async def get_messages(
    session_id: str,
    after: int = Query(0, ge=0),
    manager: ChatSessionManager = Depends(get_chat_session_manager),
):
    """Messages newer than a given message id, for polling."""
    try:
        flow = manager.get_session(session_id)
        return flow.transcript.get_messages_after(after)
    except Exception as e:
        raise to_http_exception(e, "CHAT")


@router.post("/api/chat/sessions/{session_id}/messages", response_model=TurnResponse)
async def send_message(
    session_id: str,
    message_req: MessageRequest,
    manager: ChatSessionManager = Depends(get_chat_session_manager),
):
    """Send a customer message and get the bot's reply."""
    try:
        flow = manager.get_session(session_id)
        messages = await flow.handle_user_input(message_req.text)
        return TurnResponse(
            session=_session_response(flow, include_messages=False),
            messages=messages,
        )
    except Exception as e:
        raise to_http_exception(e, "CHAT")


@router.post("/api/chat/sessions/{session_id}/confirm", response_model=TurnResponse)
async def confirm_order(
    session_id: str,
    manager: ChatSessionManager = Depends(get_chat_session_manager),
):
    """Place the order waiting for final confirmation."""
    logger.info(f"[CHAT] Confirm requested - Session: {session_id}")
    try:
        flow = manager.get_session(session_id)
        start_id = flow.transcript.next_message_id - 1
        order = await flow.confirm_order()
        return TurnResponse(
            session=_session_response(flow, include_messages=False),
            messages=flow.transcript.get_messages_after(start_id),
            order=order,
        )
    except Exception as e:
        raise to_http_exception(e, "CHAT")


@router.post("/api/chat/sessions/{session_id}/confirm/dismiss", response_model=SessionResponse)
async def dismiss_confirmation(
    session_id: str,
    manager: ChatSessionManager = Depends(get_chat_session_manager),
):
    """Close the final confirmation step without ordering."""
    try:
        flow = manager.get_session(session_id)
        flow.dismiss_confirmation()
        return _session_response(flow, include_messages=False)
    except Exception as e:
        raise to_http_exception(e, "CHAT")


@router.delete("/api/chat/sessions/{session_id}", status_code=204)
async def end_session(
    session_id: str,
    manager: ChatSessionManager = Depends(get_chat_session_manager),
):
    """End a chat session."""
    try:
        manager.end_session(session_id)
    except Exception as e:
        raise to_http_exception(e, "CHAT")
