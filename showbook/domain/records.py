# showbook/domain/records.py

from typing import Annotated

from pydantic import BaseModel, Field

U64_MAX = 2**64 - 1
U32_MAX = 2**32 - 1

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
U32 = Annotated[int, Field(ge=0, le=U32_MAX)]


class Show(BaseModel):
    """
    A bookable event with a fixed ticket inventory.
    available_tickets is owned by the booking engine.
    """

    id: U64
    title: str
    genre: str
    start_time: U64
    end_time: U64
    total_tickets: U32
    available_tickets: U32


class Booking(BaseModel):
    """A reservation of num_tickets against one show."""

    id: U64
    show_id: U64
    user_id: U64
    num_tickets: U32


class ShowPayload(BaseModel):
    title: str
    genre: str
    start_time: U64 = 0
    end_time: U64 = 0
    total_tickets: U32


class BookingPayload(BaseModel):
    show_id: U64
    user_id: U64
    num_tickets: U32
