"""Users — create a user and look one up by CIN and CIN release date.

Invariants:
    - Create runs validate_user_candidate BEFORE the service: rejected requests never touch the store
    - Lookup runs validate_lookup_params BEFORE parsing releaseDate: the CIN check always
      comes first and a blank releaseDate counts as missing
    - Routes only raise core/errors.py types (plus RequestValidationError for an unparseable
      releaseDate); api/error_handlers.py maps them to responses
    - Unexpected exceptions are wrapped in InternalError with a generic message (cause chained, logged)
    - A storage failure during lookup keeps its DatabaseError code and debug_info but
      answers with the lookup-specific message

Design Decisions:
    - get_user_service builds UserService around the request's session:
      the service is stateless apart from its injected repository
    - get_today is a dependency so the "not in the future" rule has one clock
      source that tests can pin
"""

import logging
from datetime import date

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from cin_registry.core.enforce_user import (
    parse_iso_date, validate_lookup_params, validate_user_candidate,
)
from cin_registry.core.errors import (
    DatabaseError, ErrorContext, InternalError, RegistryError,
    UserValidationError,
)
from cin_registry.infrastructure.database import get_db
from cin_registry.infrastructure.user_repository import SqlUserRepository
from cin_registry.schemas.user import UserCreate, UserResponse
from cin_registry.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])

RETRIEVAL_ERROR_MESSAGE = "Error retrieving user."


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(SqlUserRepository(db))


def get_today() -> date:
    return date.today()


@router.post(
    "", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate | None = Body(None),
    service: UserService = Depends(get_user_service),
    today: date = Depends(get_today),
):
    """Create a user after field validation and the CIN uniqueness check."""
    request_cin = body.cin if body is not None and body.cin is not None else None
    logger.info(
        f"Received request to create user. CIN: {request_cin or 'not provided'}",
        extra={"cin": request_cin},
    )

    error = validate_user_candidate(body, today)
    if error:
        raise UserValidationError(
            error["message"], error["error_code"],
            ErrorContext(cin=request_cin),
        )

    try:
        user = await service.create(body)
    except RegistryError:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error creating user with CIN {request_cin}: {e}",
            exc_info=True, extra={"cin": request_cin},
        )
        raise InternalError(context=ErrorContext(cin=request_cin)) from e
    return UserResponse.from_user(user)


@router.get("/cin/{cin}", response_model=UserResponse)
async def get_user_by_cin_and_release_date(
    cin: str,
    release_date_param: str | None = Query(None, alias="releaseDate"),
    service: UserService = Depends(get_user_service),
):
    """Get a user by CIN (path) and release date (?releaseDate=YYYY-MM-DD)."""
    logger.info(
        f"Received request to get user by CIN: {cin} "
        f"and Release Date: {release_date_param}",
        extra={"cin": cin},
    )

    error = validate_lookup_params(cin, release_date_param)
    if error:
        raise UserValidationError(
            error["message"], error["error_code"], ErrorContext(cin=cin),
        )
    release_date = parse_iso_date(release_date_param)
    if release_date is None:
        raise RequestValidationError([{
            "type": "date_from_datetime_parsing",
            "loc": ("query", "releaseDate"),
            "msg": "Input should be a valid date in the format YYYY-MM-DD",
            "input": release_date_param,
        }])

    try:
        user = await service.find_by_cin_and_release_date(cin, release_date)
    except DatabaseError as e:
        e.context.release_date = release_date
        raise InternalError(
            RETRIEVAL_ERROR_MESSAGE, e.code, e.category, e.context,
        ) from e
    except RegistryError:
        raise
    except Exception as e:
        logger.error(
            f"Error retrieving user by CIN {cin} and Release Date {release_date}: {e}",
            exc_info=True, extra={"cin": cin},
        )
        raise InternalError(
            RETRIEVAL_ERROR_MESSAGE,
            context=ErrorContext(cin=cin, release_date=release_date),
        ) from e
    return UserResponse.from_user(user)
