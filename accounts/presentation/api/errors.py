"""Translation of domain exceptions into HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ...domain.exceptions import (
    AccountsError,
    DomainInvariantError,
    InvalidCredentialsError,
    InsufficientPrivilegesError,
    ItemNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    UserAlreadyExistsError: status.HTTP_409_CONFLICT,
    DomainInvariantError: status.HTTP_409_CONFLICT,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    InsufficientPrivilegesError: status.HTTP_403_FORBIDDEN,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    ItemNotFoundError: status.HTTP_404_NOT_FOUND,
}


def status_code_for(exc: AccountsError) -> int:
    for exc_type in type(exc).__mro__:
        code = _STATUS_CODES.get(exc_type)
        if code is not None:
            return code
    return status.HTTP_400_BAD_REQUEST


async def accounts_error_handler(request: Request, exc: AccountsError) -> JSONResponse:
    code = status_code_for(exc)
    logger.info("%s %s -> %s: %s", request.method, request.url.path, code, exc)
    return JSONResponse(status_code=code, content={"detail": exc.user_message})
