from fastapi import HTTPException, status

class ValidationError(HTTPException):
    """Malformed, missing or out-of-range input."""
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class LocalDateTimeError(ValidationError):
    """Requested date-time falls outside the allowed booking window."""

class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ConflictError(HTTPException):
    """Request clashes with existing schedule or booking state."""
    def __init__(self, detail: str = "Request conflicts with existing data"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class TimeOffOverlapError(ConflictError):
    def __init__(self, detail: str = "Time off request overlaps with an existing time off period"):
        super().__init__(detail=detail)

class StateError(HTTPException):
    """Operation is not allowed in the record's current state."""
    def __init__(self, detail: str = "Operation not allowed in current state"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
