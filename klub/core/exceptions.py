"""
Domain exceptions.

Every error raised by the services and crud layers derives from KlubError
and carries the HTTP status it maps to, so the API layer can render it
without knowing the concrete type.
"""


class KlubError(Exception):
    """Base exception for Klub domain errors."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None, details: str | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class NotFound(KlubError):
    """Entity id does not exist."""

    status_code = 404
    default_message = "Not found"


class ValidationError(KlubError):
    """Missing or invalid required field."""

    status_code = 400
    default_message = "Invalid request"


class InvalidPayload(ValidationError):
    """Scanned QR payload could not be decoded."""

    default_message = "Invalid QR code format"


class InvalidSplitState(KlubError):
    """Bill cannot be split in its current state (e.g. no participants)."""

    status_code = 400
    default_message = "Bill has no participants to split between"


class DanglingParticipantReference(KlubError):
    """An item assignment points to a participant outside the bill."""

    status_code = 400
    default_message = "Item assigned to a participant that is not part of the bill"


class UpstreamError(KlubError):
    """Backing store or identity provider failure."""

    status_code = 500
    default_message = "Upstream service failure"
