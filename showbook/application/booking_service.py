import logging

from pydantic import ValidationError

from showbook.domain.exceptions import (
    InvalidInputError,
    NotEnoughTicketsError,
    NotFoundError,
    TicketCountOverflowError,
)
from showbook.domain.records import Booking, BookingPayload, Show, ShowPayload
from showbook.infrastructure.store import Store

logger = logging.getLogger(__name__)


class ShowBookingService:
    """
    Application service keeping show availability consistent with bookings.

    Every mutating operation is one read-modify-write region: all reads and
    checks happen before the first write. Shows are read with for_update so
    a concurrent host gets a row lock per show. Commit/rollback belongs to
    the caller's session (get_db / get_db_session).
    """

    def __init__(self, store: Store):
        self.store = store

    # -----------------------------
    # Shows
    # -----------------------------
    def get_show(self, show_id: int) -> Show:
        show = self.store.shows.get(show_id)
        if show is None:
            raise NotFoundError(f"a show with id={show_id} not found")
        return show

    def add_show(self, payload: ShowPayload) -> Show:
        if not payload.title:
            raise InvalidInputError("show title must not be empty")
        if not payload.genre:
            raise InvalidInputError("show genre must not be empty")
        if payload.total_tickets == 0:
            raise InvalidInputError("show total_tickets must be greater than 0")

        show = Show(
            id=self.store.ids.next_id(),
            title=payload.title,
            genre=payload.genre,
            start_time=payload.start_time,
            end_time=payload.end_time,
            total_tickets=payload.total_tickets,
            available_tickets=payload.total_tickets,
        )
        self.store.shows.insert_or_replace(show)

        logger.info("Show created. show_id=%s total_tickets=%s", show.id, show.total_tickets)
        return show

    def update_show(self, show_id: int, payload: ShowPayload) -> Show:
        """
        payload.total_tickets is a number of tickets to withdraw from
        availability, not a new total. No other field is changed.
        """
        show = self.store.shows.get(show_id, for_update=True)
        if show is None:
            raise NotFoundError(
                f"couldn't update a show with id={show_id}. show not found"
            )

        change = payload.total_tickets
        if change == 0 or change > show.available_tickets:
            raise NotEnoughTicketsError(
                requested=change,
                available=show.available_tickets,
            )

        updated = _with_available(show, show.available_tickets - change)
        self.store.shows.insert_or_replace(updated)

        logger.info(
            "Show availability reduced. show_id=%s by=%s available_tickets=%s",
            show_id,
            change,
            updated.available_tickets,
        )
        return updated

    def delete_show(self, show_id: int) -> Show:
        # Bookings referencing the show are left in place.
        show = self.store.shows.remove(show_id)
        if show is None:
            raise NotFoundError(
                f"couldn't delete a show with id={show_id}. show not found."
            )

        logger.info("Show deleted. show_id=%s", show_id)
        return show

    def get_remaining_tickets(self, show_id: int) -> int:
        return self.get_show(show_id).available_tickets

    # -----------------------------
    # Bookings
    # -----------------------------
    def get_booking(self, booking_id: int) -> Booking:
        booking = self.store.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(f"a booking with id={booking_id} not found")
        return booking

    def add_booking(self, payload: BookingPayload) -> Booking:
        if payload.num_tickets == 0:
            raise InvalidInputError("booking num_tickets must be greater than 0")

        show = self.store.shows.get(payload.show_id, for_update=True)
        if show is None:
            raise NotFoundError(f"a show with id={payload.show_id} not found")

        if payload.num_tickets > show.available_tickets:
            raise NotEnoughTicketsError(
                requested=payload.num_tickets,
                available=show.available_tickets,
            )

        booking = Booking(
            id=self.store.ids.next_id(),
            show_id=payload.show_id,
            user_id=payload.user_id,
            num_tickets=payload.num_tickets,
        )
        self.store.shows.insert_or_replace(
            _with_available(show, show.available_tickets - booking.num_tickets)
        )
        self.store.bookings.insert_or_replace(booking)

        logger.info(
            "Booking created. booking_id=%s show_id=%s num_tickets=%s",
            booking.id,
            booking.show_id,
            booking.num_tickets,
        )
        return booking

    def update_booking(self, booking_id: int, payload: BookingPayload) -> Booking:
        """
        Availability of payload.show_id is adjusted by the change in
        num_tickets. When the booking moves to another show the old show
        keeps its reduced availability.
        """
        booking = self.store.bookings.get(booking_id, for_update=True)
        if booking is None:
            raise NotFoundError(f"a booking with id={booking_id} not found")

        show = self.store.shows.get(payload.show_id, for_update=True)
        if show is None:
            raise NotFoundError(f"a show with id={payload.show_id} not found")

        delta = payload.num_tickets - booking.num_tickets
        if delta > show.available_tickets or payload.num_tickets == 0:
            raise NotEnoughTicketsError(
                requested=delta,
                available=show.available_tickets,
            )

        updated_show = _with_available(show, show.available_tickets - delta)

        if payload.show_id != booking.show_id:
            logger.warning(
                "Booking moved between shows without returning tickets. "
                "booking_id=%s from_show_id=%s to_show_id=%s num_tickets=%s",
                booking_id,
                booking.show_id,
                payload.show_id,
                booking.num_tickets,
            )

        updated = Booking(
            id=booking.id,
            show_id=payload.show_id,
            user_id=payload.user_id,
            num_tickets=payload.num_tickets,
        )
        self.store.shows.insert_or_replace(updated_show)
        self.store.bookings.insert_or_replace(updated)

        logger.info(
            "Booking updated. booking_id=%s show_id=%s num_tickets=%s delta=%s",
            booking_id,
            updated.show_id,
            updated.num_tickets,
            delta,
        )
        return updated

    def delete_booking(self, booking_id: int) -> Booking:
        booking = self.store.bookings.get(booking_id, for_update=True)
        if booking is None:
            raise NotFoundError(f"a booking with id={booking_id} not found")

        show = self.store.shows.get(booking.show_id, for_update=True)
        if show is None:
            self.store.bookings.remove(booking_id)
            logger.warning(
                "Booking deleted for missing show; tickets not returned. "
                "booking_id=%s show_id=%s num_tickets=%s",
                booking_id,
                booking.show_id,
                booking.num_tickets,
            )
            return booking

        updated_show = _with_available(show, show.available_tickets + booking.num_tickets)
        self.store.bookings.remove(booking_id)
        self.store.shows.insert_or_replace(updated_show)

        logger.info(
            "Booking deleted. booking_id=%s show_id=%s returned_tickets=%s",
            booking_id,
            booking.show_id,
            booking.num_tickets,
        )
        return booking


def _with_available(show: Show, available: int) -> Show:
    """Validated copy of show; out-of-range counts never reach storage."""
    try:
        return Show(**{**show.model_dump(), "available_tickets": available})
    except ValidationError as exc:
        raise TicketCountOverflowError(show_id=show.id, available=available) from exc
