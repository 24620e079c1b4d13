"""
Error taxonomy

Every error code produced by a use case belongs to exactly one abstract kind.
The API layer translates kinds to transport status codes in a single place.
"""

from enum import Enum


class ErrorKind(str, Enum):
    invalid_argument = "invalid_argument"
    unauthenticated = "unauthenticated"
    failed_precondition = "failed_precondition"
    not_found = "not_found"
    already_exists = "already_exists"
    unavailable = "unavailable"
    internal = "internal"


ERROR_KINDS = {
    # InvalidArgument
    "INVALID_EMAIL": ErrorKind.invalid_argument,
    "INVALID_PHONE": ErrorKind.invalid_argument,
    "INVALID_PASSWORD": ErrorKind.invalid_argument,
    "MISSING_FIELD": ErrorKind.invalid_argument,
    "INVALID_REQUEST": ErrorKind.invalid_argument,
    "CODE_EXPIRED": ErrorKind.invalid_argument,
    "UNSUPPORTED_PROVIDER": ErrorKind.invalid_argument,
    "UNSUPPORTED_SSO_PROVIDER": ErrorKind.invalid_argument,
    "PROVIDER_EMAIL_MISSING": ErrorKind.invalid_argument,
    "TWO_FACTOR_NOT_ENABLED": ErrorKind.invalid_argument,
    # Unauthenticated
    "INVALID_CREDENTIALS": ErrorKind.unauthenticated,
    "INVALID_TWO_FACTOR_CODE": ErrorKind.unauthenticated,
    "INVALID_PASSWORD_CONFIRMATION": ErrorKind.unauthenticated,
    "INVALID_TOKEN": ErrorKind.unauthenticated,
    "INVALID_REFRESH_TOKEN": ErrorKind.unauthenticated,
    "INVALID_VERIFICATION_CODE": ErrorKind.unauthenticated,
    "ACCOUNT_INACTIVE": ErrorKind.unauthenticated,
    "UPSTREAM_AUTH_FAILED": ErrorKind.unauthenticated,
    "SSO_DOMAIN_MISMATCH": ErrorKind.unauthenticated,
    # FailedPrecondition
    "TWO_FACTOR_REQUIRED": ErrorKind.failed_precondition,
    "TWO_FACTOR_SETUP_NOT_STARTED": ErrorKind.failed_precondition,
    # NotFound
    "CODE_NOT_FOUND": ErrorKind.not_found,
    "USER_NOT_FOUND": ErrorKind.not_found,
    "SSO_NOT_CONFIGURED": ErrorKind.not_found,
    # AlreadyExists
    "EMAIL_ALREADY_EXISTS": ErrorKind.already_exists,
    "PHONE_ALREADY_EXISTS": ErrorKind.already_exists,
    "CODE_ALREADY_USED": ErrorKind.already_exists,
    "TWO_FACTOR_ALREADY_ENABLED": ErrorKind.already_exists,
    # Unavailable
    "UPSTREAM_UNAVAILABLE": ErrorKind.unavailable,
    "NOTIFICATION_UNAVAILABLE": ErrorKind.unavailable,
    # Internal
    "INTERNAL_ERROR": ErrorKind.internal,
}


def kind_of(code: str) -> ErrorKind:
    """Unknown codes are treated as internal so nothing unmapped reaches a client."""
    return ERROR_KINDS.get(code, ErrorKind.internal)
