

class ShowBookingError(Exception):
    """
    Base exception for all domain-level errors
    raised by the show booking engine.
    """


class NotFoundError(ShowBookingError):
    """
    Raised when no show or booking exists for a given id.
    """

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(msg)


class NotEnoughTicketsError(ShowBookingError):
    """Raised when a ticket-count change cannot be covered by availability."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available

        message = (
            f"not enough tickets: "
            f"requested={requested} available={available}"
        )
        super().__init__(message)


class InvalidInputError(ShowBookingError):
    """Raised when a create request carries empty or zero-valued input."""


class RecordTooLargeError(ShowBookingError):
    """Raised when an encoded record exceeds the per-record byte bound."""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"encoded record is {size} bytes, limit is {max_size}"
        )


class IdSpaceExhaustedError(ShowBookingError):
    """Raised when the id counter cannot be advanced any further."""


class TicketCountOverflowError(ShowBookingError):
    """Raised when a show's availability would leave the u32 range."""

    def __init__(self, show_id: int, available: int):
        self.show_id = show_id
        self.available = available
        super().__init__(
            f"available_tickets of show id={show_id} would become {available}"
        )
