"""Domain errors raised by services and translated to HTTP responses by the API."""
from typing import Iterable


class GroundBookError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(GroundBookError):
    """Malformed input. Reported as a client error, never retried."""

    status_code = 400

    def __init__(self, reason: str, detail: str = None):
        super().__init__(detail or reason)
        self.reason = reason

    def to_dict(self) -> dict:
        return {"message": self.message, "reason": self.reason}


class ConflictError(GroundBookError):
    """Requested slots collide with confirmed bookings for the same ground and date."""

    status_code = 409

    def __init__(self, conflicting_slots: Iterable[str]):
        super().__init__("Some slots are already booked")
        self.conflicting_slots = frozenset(conflicting_slots)

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "conflicting_slots": sorted(self.conflicting_slots),
        }


class NotFoundError(GroundBookError):
    """A referenced ground, booking or user does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier=None):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.identifier = identifier


class StoreUnavailable(GroundBookError):
    """The record store failed a query or write. Safe to retry the read side."""

    status_code = 503

    def __init__(self, operation: str):
        super().__init__(f"Record store unavailable during {operation}")
        self.operation = operation


class AuthenticationError(GroundBookError):
    status_code = 401


class PermissionDeniedError(GroundBookError):
    status_code = 403
