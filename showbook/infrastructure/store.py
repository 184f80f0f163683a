# showbook/infrastructure/store.py

from sqlalchemy.orm import Session

from showbook.infrastructure.repositories.booking_repository import BookingRepository
from showbook.infrastructure.repositories.id_allocator import IdAllocator
from showbook.infrastructure.repositories.show_repository import ShowRepository


class Store:
    """
    Everything the booking engine persists, bound to one session.
    The session is the unit of work for a single call.
    """

    def __init__(self, db: Session):
        self.db = db
        self.shows = ShowRepository(db)
        self.bookings = BookingRepository(db)
        self.ids = IdAllocator(db)
