"""Router for the Conversation feature."""
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from di.container import ApplicationContainer as DependencyContainer
from api.features.conversation.controller import ConversationController
from api.features.conversation.dtos import (
    ConversationDTO,
    ConversationListResponse,
    CreateConversationRequest,
    DeleteConversationResponse,
    MessagesResponse,
)
from api.shared.db import get_db_session
from api.shared.dtos import HealthCheckResponse
from api.shared.response import ResponseModel

router = APIRouter()


@router.get("/health", response_model=ResponseModel[HealthCheckResponse])
async def health_check():
    return ResponseModel.success(
        data=HealthCheckResponse(status="healthy", dependencies={"database": "ok"}),
        message="Conversation service is healthy",
    )


@router.post("/", response_model=ResponseModel[ConversationDTO])
@inject
async def create_conversation(
    request: CreateConversationRequest,
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    conv = await controller.create_conversation(request, db_session=db_session)
    return ResponseModel.success(data=conv, message="Conversation created")


@router.get("/", response_model=ResponseModel[ConversationListResponse])
@inject
async def list_conversations(
    user_id: int = Query(..., description="Owner user identifier"),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    result = await controller.list_conversations(user_id, db_session=db_session)
    return ResponseModel.success(data=result, message="Conversations listed")


@router.get("/{conversation_id}", response_model=ResponseModel[ConversationDTO])
@inject
async def get_conversation(
    conversation_id: int,
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    conv = await controller.get_conversation(conversation_id, db_session=db_session)
    return ResponseModel.success(data=conv, message="Conversation fetched")


@router.get(
    "/{conversation_id}/messages", response_model=ResponseModel[MessagesResponse]
)
@inject
async def get_messages(
    conversation_id: int,
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    result = await controller.get_messages(conversation_id, db_session=db_session)
    return ResponseModel.success(data=result, message="Messages fetched")


@router.delete(
    "/{conversation_id}", response_model=ResponseModel[DeleteConversationResponse]
)
@inject
async def delete_conversation(
    conversation_id: int,
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    result = await controller.delete_conversation(
        conversation_id, db_session=db_session
    )
    return ResponseModel.success(data=result, message="Conversation deleted")
