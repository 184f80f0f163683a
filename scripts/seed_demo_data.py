from datetime import datetime, timedelta, timezone

from showbook.application.booking_service import ShowBookingService
from showbook.domain.records import BookingPayload, ShowPayload
from showbook.infrastructure.db.models import Base
from showbook.infrastructure.db.session import engine, get_db_session
from showbook.infrastructure.store import Store


def _ts(days_from_now: int, hour: int, minute: int) -> int:
    now = datetime.now(timezone.utc)
    target = now + timedelta(days=days_from_now)
    return int(target.replace(hour=hour, minute=minute, second=0, microsecond=0).timestamp())


def seed_shows(service: ShowBookingService) -> list[int]:
    show_defs = [
        {
            "title": "Hamlet",
            "genre": "Drama",
            "start_time": _ts(days_from_now=7, hour=19, minute=30),
            "end_time": _ts(days_from_now=7, hour=22, minute=30),
            "total_tickets": 120,
        },
        {
            "title": "The Improv Hour",
            "genre": "Comedy",
            "start_time": _ts(days_from_now=3, hour=21, minute=0),
            "end_time": _ts(days_from_now=3, hour=22, minute=0),
            "total_tickets": 40,
        },
    ]

    return [service.add_show(ShowPayload(**item)).id for item in show_defs]


def seed_bookings(service: ShowBookingService, show_ids: list[int]) -> None:
    bookings = [
        {"show_id": show_ids[0], "user_id": 1, "num_tickets": 4},
        {"show_id": show_ids[0], "user_id": 2, "num_tickets": 2},
        {"show_id": show_ids[1], "user_id": 1, "num_tickets": 6},
    ]

    for item in bookings:
        service.add_booking(BookingPayload(**item))


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with get_db_session() as db:
        service = ShowBookingService(Store(db))
        show_ids = seed_shows(service)
        seed_bookings(service, show_ids)
    print(f"Seed complete: shows {show_ids} added with sample bookings.")


if __name__ == "__main__":
    main()
