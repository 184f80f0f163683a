# showbook/infrastructure/db/stable_map.py

from typing import Generic, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from showbook.domain.exceptions import RecordTooLargeError
from showbook.infrastructure.db.models import IdCounterRow

MAX_RECORD_SIZE = 1024

# Keys and counter values live in signed BIGINT columns.
MAX_STORED_KEY = 2**63 - 1

R = TypeVar("R", bound=BaseModel)


def encode_record(record: BaseModel, max_size: int = MAX_RECORD_SIZE) -> bytes:
    data = record.model_dump_json().encode("utf-8")
    if len(data) > max_size:
        raise RecordTooLargeError(size=len(data), max_size=max_size)
    return data


def decode_record(record_type: Type[R], data: bytes) -> R:
    return record_type.model_validate_json(data)


def _storable_key(key: int) -> bool:
    return 0 <= key <= MAX_STORED_KEY


class StableMap(Generic[R]):
    """
    Durable map from u64 keys to bounded-size records.

    Each map lives in its own table (see models._KeyValueRow).
    Writes are flushed immediately so later reads in the same
    session see them; durability comes from the session commit.
    Keys above MAX_STORED_KEY can never have been inserted, so
    lookups for them simply miss.
    """

    def __init__(
        self,
        db: Session,
        row_type: type,
        record_type: Type[R],
        max_size: int = MAX_RECORD_SIZE,
    ):
        self.db = db
        self.row_type = row_type
        self.record_type = record_type
        self.max_size = max_size

    def get(self, key: int, for_update: bool = False) -> R | None:
        if not _storable_key(key):
            return None

        row = self.db.get(self.row_type, key, with_for_update=for_update)
        if row is None:
            return None
        return decode_record(self.record_type, row.payload)

    def insert(self, key: int, record: R) -> R | None:
        """
        Upsert. Returns the previous record stored under key, if any.
        """
        if not _storable_key(key):
            raise ValueError(f"key {key} is outside the storable range")
        data = encode_record(record, self.max_size)

        row = self.db.get(self.row_type, key)
        if row is None:
            self.db.add(self.row_type(id=key, payload=data))
            self.db.flush()
            return None

        previous = decode_record(self.record_type, row.payload)
        row.payload = data
        self.db.flush()
        return previous

    def remove(self, key: int) -> R | None:
        if not _storable_key(key):
            return None

        row = self.db.get(self.row_type, key, with_for_update=True)
        if row is None:
            return None

        previous = decode_record(self.record_type, row.payload)
        self.db.delete(row)
        self.db.flush()
        return previous


class IdCell:
    """A single durable u64 value, initialised lazily to `initial`."""

    def __init__(self, db: Session, name: str, initial: int = 0):
        self.db = db
        self.name = name
        self.initial = initial

    def get(self, for_update: bool = False) -> int:
        row = self.db.get(IdCounterRow, self.name, with_for_update=for_update)
        if row is None:
            return self.initial
        return row.value

    def set(self, value: int) -> int:
        """Stores value and returns the previous one."""
        row = self.db.get(IdCounterRow, self.name, with_for_update=True)
        if row is None:
            self.db.add(IdCounterRow(name=self.name, value=value))
            self.db.flush()
            return self.initial

        previous = row.value
        row.value = value
        self.db.flush()
        return previous
