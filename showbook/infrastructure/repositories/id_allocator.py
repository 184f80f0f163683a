# showbook/infrastructure/repositories/id_allocator.py

from sqlalchemy.orm import Session

from showbook.domain.exceptions import IdSpaceExhaustedError
from showbook.infrastructure.db.stable_map import MAX_STORED_KEY, IdCell

GLOBAL_COUNTER = "global"


class IdAllocator:
    """Issues ids from one counter shared by shows and bookings."""

    def __init__(self, db: Session, counter_name: str = GLOBAL_COUNTER):
        self._cell = IdCell(db, counter_name, initial=0)

    def peek(self) -> int:
        return self._cell.get()

    def next_id(self) -> int:
        # Read under the row lock so two callers never see the same value.
        current = self._cell.get(for_update=True)
        if current >= MAX_STORED_KEY:
            raise IdSpaceExhaustedError("id counter cannot be incremented")

        self._cell.set(current + 1)
        return current
