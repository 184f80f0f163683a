# showbook/infrastructure/db/models.py

from sqlalchemy import (
    BigInteger,
    LargeBinary,
    String,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from showbook.infrastructure.db.session import Base


class _KeyValueRow:
    """
    Columns shared by every durable map table.
    key = record id, payload = encoded record.
    """

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )
    payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)


class ShowRow(_KeyValueRow, Base):
    __tablename__ = "shows"


class BookingRow(_KeyValueRow, Base):
    __tablename__ = "bookings"


class IdCounterRow(Base):
    __tablename__ = "id_counters"

    name: Mapped[str] = mapped_column(String(32), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        CheckConstraint("value >= 0", name="ck_id_counter_nonnegative"),
    )
