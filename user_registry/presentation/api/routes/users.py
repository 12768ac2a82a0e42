"""User API routes -- registration."""
from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status

from user_registry.application.commands import CreateUserCommand
from user_registry.application.context import RequestContext
from user_registry.application.use_cases.user_management import CreateUserUseCase
from user_registry.presentation.api.dependencies import get_create_user_use_case, get_request_context
from user_registry.presentation.api.schemas import CreateUserRequest, ErrorResponse, IdResponse
from user_registry.shared.result import Err

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=IdResponse,
    status_code=status.HTTP_200_OK,
    summary="Create a user",
    responses={
        status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "User already exists"},
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    },
)
async def create_user(
    body: CreateUserRequest,
    context: RequestContext = Depends(get_request_context),
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
) -> IdResponse:
    """Register a new account and return its id."""
    command = CreateUserCommand(
        name=body.name,
        email=body.email,
        password=body.password,
        correlation_id=context.request_id,
    )
    result = await use_case.execute(command)
    if isinstance(result, Err):
        raise result.error
    return IdResponse(id=result.value)
