
class SchedulingError(Exception):
    """Base class for recoverable, per-request scheduling failures."""
    pass


class InvalidAvailabilityError(SchedulingError, ValueError):
    """Raised when a host's availability violates its own invariants."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidPolicyError(SchedulingError, ValueError):
    """Raised when a booking policy is malformed (bad duration, negative buffers or limits)."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidSlotError(SchedulingError, ValueError):
    """Raised when a requested slot could never be offered by the host's availability."""
    pass


class ConflictError(SchedulingError):
    """Raised when a slot is no longer available; the caller should re-fetch slots."""
    pass


class PolicyLimitExceeded(ConflictError):
    """Raised when the host's per-day or per-week booking cap is already reached."""
    pass


class NotFoundError(SchedulingError, LookupError):
    """Raised when a booking id is unknown."""
    pass


class LedgerUnavailableError(RuntimeError):
    """Raised when the booking ledger cannot be read; nothing may be written until it is repaired."""
    pass
