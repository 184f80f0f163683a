from pydantic import BaseModel

from showbook.domain.records import (
    Booking,
    BookingPayload,
    Show,
    ShowPayload,
    U32,
    U64,
)


class ShowRequest(ShowPayload):
    pass


class ShowResponse(Show):
    pass


class BookingRequest(BookingPayload):
    pass


class BookingResponse(Booking):
    pass


class RemainingTicketsResponse(BaseModel):
    show_id: U64
    available_tickets: U32
