from typing import NoReturn

from fastapi import status

from libs.result import Error
from src.domain.errors import ErrorKind, kind_of

STATUS_BY_KIND = {
    ErrorKind.invalid_argument: status.HTTP_400_BAD_REQUEST,
    ErrorKind.unauthenticated: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.failed_precondition: status.HTTP_400_BAD_REQUEST,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.already_exists: status.HTTP_409_CONFLICT,
    ErrorKind.unavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error) -> NoReturn:
    """Single translation point from a use case Error to an HTTP error."""
    kind = kind_of(error.code)
    if kind == ErrorKind.internal:
        raise ServerError(error)
    raise ClientError(error, status_code=STATUS_BY_KIND[kind])
