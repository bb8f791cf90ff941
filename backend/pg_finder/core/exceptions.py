"""
Ledger error kinds.

Services raise these directly; because they are HTTPExceptions, FastAPI
renders them without extra handlers. `error_code` is included in the
response body so clients can branch on the kind rather than the message.
"""

from typing import Optional

from fastapi import HTTPException, status


class LedgerError(HTTPException):
    """Base class for all reservation ledger errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Reservation error"

    def __init__(self, detail: Optional[str] = None, error_code: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)
        self.error_code = error_code or self.__class__.__name__


class NotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class InvalidTransition(LedgerError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Status change not permitted"

    def __init__(self, current: str, requested: str, detail: Optional[str] = None):
        super().__init__(detail or f"Cannot move booking from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class AlreadyOccupied(LedgerError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Bed is already occupied"

    def __init__(self, bed_id: int, detail: Optional[str] = None):
        super().__init__(detail or f"Bed {bed_id} is already occupied")
        self.bed_id = bed_id


class Unauthorized(LedgerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not permitted for this caller"


class StoreUnavailable(LedgerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage temporarily unavailable, please retry"
