class BookingError(Exception):
    """Base class for every error raised by slot listing and booking."""
    pass


class ConfigurationError(BookingError):
    """Raised when doctor or treatment setup is unusable (non-positive interval or duration)."""
    pass


class SlotConflict(BookingError):
    """Raised when the selected slot was taken between listing and commit."""

    def __init__(self, message: str, conflicting_ids: list[str] | None = None) -> None:
        super().__init__(message)
        self.conflicting_ids = list(conflicting_ids or [])


class StoreUnavailableError(BookingError):
    """Raised when the appointment store fails (timeouts, network errors, service unavailable)."""
    pass


class StoreRequestError(BookingError):
    """Raised when the appointment store rejects a request (4xx). Retrying the same request will not help."""
    pass


class BookingValidationError(BookingError, ValueError):
    """Raised when required selection inputs are missing or invalid."""
    pass


class TreatmentNotOffered(BookingValidationError):
    pass


class SlotOutsideWorkingHours(BookingValidationError):
    pass


class NotFoundError(BookingError):
    pass


class DoctorNotFound(NotFoundError):
    pass


class TreatmentNotFound(NotFoundError):
    pass
