# showbook/infrastructure/repositories/show_repository.py

from sqlalchemy.orm import Session

from showbook.domain.records import Show
from showbook.infrastructure.db.models import ShowRow
from showbook.infrastructure.db.stable_map import StableMap


class ShowRepository:

    def __init__(self, db: Session):
        self.db = db
        self._map: StableMap[Show] = StableMap(db, ShowRow, Show)

    def get(self, show_id: int, for_update: bool = False) -> Show | None:
        """
        for_update=True -> SELECT ... FOR UPDATE
        Row lock for read-modify-write of available_tickets.
        """
        return self._map.get(show_id, for_update=for_update)

    def insert_or_replace(self, show: Show) -> Show:
        self._map.insert(show.id, show)
        return show

    def remove(self, show_id: int) -> Show | None:
        return self._map.remove(show_id)
