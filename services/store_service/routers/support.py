"""Customer support chat router."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.common.errors import NotFoundError
from libs.db.session import get_async_db
from services.store_service.models import SupportMessage
from services.store_service.schemas import (
    MessageResponse,
    SupportMessageCreate,
    SupportMessageCreated,
    SupportMessageResponse,
    SupportRespondRequest,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/customersupport", tags=["support"])


@router.post("", response_model=SupportMessageCreated)
async def send_support_message(
    body: SupportMessageCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    chat = SupportMessage(customer_id=current_user.customer_id, message=body.message)
    db.add(chat)
    await db.commit()
    return SupportMessageCreated(message="Message sent successfully", chat_id=chat.id)


@router.get("", response_model=list[SupportMessageResponse])
async def list_support_messages(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """The customer's messages and any responses, newest first."""
    result = await db.execute(
        select(SupportMessage)
        .where(SupportMessage.customer_id == current_user.customer_id)
        .order_by(SupportMessage.timestamp.desc(), SupportMessage.id.desc())
    )
    return result.scalars().all()


@router.post("/respond", response_model=MessageResponse)
async def respond_to_support_message(
    body: SupportRespondRequest,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Attach a staff response to a chat message (admin only)."""
    chat = await db.get(SupportMessage, body.chat_id)
    if chat is None:
        raise NotFoundError("Chat message not found")
    chat.response = body.response
    await db.commit()
    return MessageResponse(message="Response sent successfully")
