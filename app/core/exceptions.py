from typing import Any, Dict, List, Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    kind = "InternalError"

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_detail(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message}


class InvalidDateRange(ServiceError):
    kind = "InvalidDateRange"

    def __init__(self, message: str = "End date must be after start date") -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class EmployeeNotFound(ServiceError):
    kind = "EmployeeNotFound"

    def __init__(self, message: str = "The specified employee does not exist") -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ReplacementNotFound(ServiceError):
    kind = "ReplacementNotFound"

    def __init__(self, message: str = "The specified replacement employee does not exist") -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class OverlappingRequest(ServiceError):
    kind = "OverlappingRequest"

    def __init__(self, message: str = "A vacation request already overlaps these dates") -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class NotFound(ServiceError):
    kind = "NotFound"

    def __init__(self, message: str = "Vacation request not found") -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class Forbidden(ServiceError):
    kind = "Forbidden"

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class InvalidTransition(ServiceError):
    kind = "InvalidTransition"

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class ImmutableState(ServiceError):
    kind = "ImmutableState"

    def __init__(self, message: str = "Only pending requests can be modified") -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class ValidationError(ServiceError):
    """Aggregated field validation failure; ``details`` lists every violated field."""

    kind = "ValidationError"

    def __init__(self, details: List[Dict[str, str]], message: Optional[str] = None) -> None:
        if message is None:
            fields = ", ".join(d["field"] for d in details)
            message = f"Invalid input: {fields}" if fields else "Invalid input"
        super().__init__(message, status.HTTP_400_BAD_REQUEST)
        self.details = details

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["details"] = self.details
        return detail


class StoreUnavailable(ServiceError):
    kind = "StoreUnavailable"

    def __init__(self, message: str = "The data store is unavailable") -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)
