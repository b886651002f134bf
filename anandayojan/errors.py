# anandayojan/errors.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import HTTPException, status


class RejectionKind(str, Enum):
    NOT_FOUND = "NotFound"
    VALIDATION_ERROR = "ValidationError"
    TOO_LATE_TO_CANCEL = "TooLateToCancel"
    INVALID_SIGNATURE = "InvalidSignature"
    ALREADY_HAS_FEEDBACK = "AlreadyHasFeedback"
    INVALID_STATE = "InvalidState"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"


_STATUS_CODES = {
    RejectionKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RejectionKind.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    RejectionKind.TOO_LATE_TO_CANCEL: status.HTTP_400_BAD_REQUEST,
    RejectionKind.INVALID_SIGNATURE: status.HTTP_400_BAD_REQUEST,
    RejectionKind.ALREADY_HAS_FEEDBACK: status.HTTP_409_CONFLICT,
    RejectionKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    RejectionKind.UPSTREAM_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
}


@dataclass(frozen=True)
class Rejection:
    """A guard or business-rule violation returned by the lifecycle manager."""

    kind: RejectionKind
    message: str
    booking_id: Optional[str] = None

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]


class UpstreamUnavailable(Exception):
    """Raised by a collaborator (payment, email, identity) that failed or is unreachable."""

    def __init__(self, service: str, message: str = "Service unavailable"):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message


class InvalidIdentityToken(Exception):
    """The identity provider rejected the presented token."""


def rejection_to_http(rejection: Rejection) -> HTTPException:
    detail = rejection.message
    if rejection.booking_id:
        # The record was kept; tell the client which one
        detail = {"message": rejection.message, "bookingId": rejection.booking_id}
    return HTTPException(status_code=rejection.status_code, detail=detail)


__all__ = [
    "RejectionKind",
    "Rejection",
    "UpstreamUnavailable",
    "InvalidIdentityToken",
    "rejection_to_http",
]
