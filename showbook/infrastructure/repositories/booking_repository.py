# showbook/infrastructure/repositories/booking_repository.py

from sqlalchemy.orm import Session

from showbook.domain.records import Booking
from showbook.infrastructure.db.models import BookingRow
from showbook.infrastructure.db.stable_map import StableMap


class BookingRepository:

    def __init__(self, db: Session):
        self.db = db
        self._map: StableMap[Booking] = StableMap(db, BookingRow, Booking)

    def get(
        self,
        booking_id: int,
        for_update: bool = False,
    ) -> Booking | None:

        return self._map.get(booking_id, for_update=for_update)

    def insert_or_replace(
        self,
        booking: Booking,
    ) -> Booking:

        self._map.insert(booking.id, booking)
        return booking

    def remove(
        self,
        booking_id: int,
    ) -> Booking | None:

        return self._map.remove(booking_id)
