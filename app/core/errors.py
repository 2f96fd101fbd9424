"""Exception types shared by the repository and the reservation services."""


class ReservationError(Exception):
    """Base class for every error raised by this package."""


class StorageError(ReservationError):
    """A read or write against storage failed.

    ``message`` is the backend's own text, kept verbatim so it can be shown
    to the user. Storage failures are always worth retrying.
    """

    retryable = True

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class RecordTimeError(ReservationError):
    """A single schedule record carries a time value that cannot be parsed."""

    def __init__(self, record_id, value):
        super().__init__(f"record {record_id}: unparseable time {value!r}")
        self.record_id = record_id
        self.value = value


class NoRoomSelectedError(ReservationError):
    pass
