"""Router for the Tutor feature."""
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from di.container import ApplicationContainer as DependencyContainer
from api.features.tutor.controller import TutorController
from api.features.tutor.dtos import SolveProblemRequest, SolveProblemResponse
from api.shared.db import get_db_session
from api.shared.dtos import HealthCheckResponse
from api.shared.response import ResponseModel

router = APIRouter()


@router.get("/health", response_model=ResponseModel[HealthCheckResponse])
async def health_check():
    """Health check endpoint for the tutor service."""
    return ResponseModel.success(
        data=HealthCheckResponse(
            status="healthy", dependencies={"llm": "ok", "database": "ok"}
        ),
        message="Tutor service is healthy",
    )


@router.post(
    "/conversations/{conversation_id}/solve",
    response_model=ResponseModel[SolveProblemResponse],
)
@inject
async def solve_problem(
    conversation_id: int,
    request: SolveProblemRequest,
    controller: TutorController = Depends(
        Provide[DependencyContainer.controllers.tutor_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Answer a math question step by step within a conversation."""
    result = await controller.solve_problem(
        conversation_id, request, db_session=db_session
    )
    return ResponseModel.success(data=result, message="Problem solved")
