"""Controller for the Tutor feature."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.tutor.dtos import SolveProblemRequest, SolveProblemResponse
from api.features.tutor.service import TutorService
from api.shared.exceptions import (
    InvocationError,
    StoreUnavailableError,
    ValidationError,
    to_http_exception,
)

logger = logging.getLogger("tutor.exchange.controller")


class TutorController:
    """Controller for question/answer exchanges."""

    def __init__(self, tutor_service: TutorService):
        self.tutor_service = tutor_service

    async def solve_problem(
        self,
        conversation_id: int,
        request: SolveProblemRequest,
        *,
        db_session: AsyncSession,
    ) -> SolveProblemResponse:
        try:
            result = await self.tutor_service.solve_problem(
                conversation_id,
                request.question,
                db_session=db_session,
                user_id=request.user_id,
            )
        except ValidationError as e:
            logger.warning(f"Exchange rejected: {e.message}")
            raise to_http_exception(e)
        except InvocationError as e:
            logger.error(f"Exchange failed at invocation: {e.message}")
            raise to_http_exception(e)
        except StoreUnavailableError as e:
            logger.error(f"Exchange failed at store: {e.message}")
            raise to_http_exception(e)
        return SolveProblemResponse.model_validate(result.model_dump())
