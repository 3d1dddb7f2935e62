"""Domain exceptions raised by clinic services."""


class ClinicError(Exception):
    """Base class for clinic service failures."""


class PatientNotFoundError(ClinicError, LookupError):
    """Raised when an operation references an unknown patient id."""

    def __init__(self, patient_id: str) -> None:
        super().__init__(f"Patient '{patient_id}' not found")
        self.patient_id = patient_id


class StoreError(ClinicError):
    """Raised when the key-value store cannot be read or written."""


class AdvisoryError(ClinicError):
    """Raised when the generative-language service call fails."""


class AdvisoryCancelledError(ClinicError):
    """Raised when an advisory request was superseded before completing."""

    def __init__(self, screen: str, request_id: str) -> None:
        super().__init__(
            f"Advisory request '{request_id}' on screen '{screen}' was cancelled"
        )
        self.screen = screen
        self.request_id = request_id
