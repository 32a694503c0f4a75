import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.admin.message import CreateMessage
from academy.services.admin.messages import MessageService

router = APIRouter(prefix="/admin/messages", tags=["Admin Messages"])


@router.get("")
async def list_messages(
    authorization: AuthorizationService = Depends(AuthorizationService),
    message_service: MessageService = Depends(MessageService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await message_service.list_messages_async()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_message(
    schema: CreateMessage = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    message_service: MessageService = Depends(MessageService),
):
    staff = await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await message_service.create_message_async(schema, staff)


@router.delete("/{message_id}")
async def delete_message(
    message_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    message_service: MessageService = Depends(MessageService),
):
    await authorization.require_role(["ADMIN", "SUPERVISOR"])
    return await message_service.delete_message_async(message_id)
