# tests/unit/test_concurrent_bookings.py

import threading
import time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from showbook.application.booking_service import ShowBookingService
from showbook.domain.exceptions import NotEnoughTicketsError
from showbook.domain.records import BookingPayload, ShowPayload
from showbook.infrastructure.db.models import Base
from showbook.infrastructure.db.session import enable_sqlite_write_locks
from showbook.infrastructure.repositories.show_repository import ShowRepository
from showbook.infrastructure.store import Store


@pytest.fixture
def file_sessions(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'showbook.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    enable_sqlite_write_locks(engine)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture
def slow_show_reads(monkeypatch):
    # Widen the window between reading a show and writing it back.
    original_get = ShowRepository.get

    def slow_get(self, show_id, for_update=False):
        show = original_get(self, show_id, for_update=for_update)
        time.sleep(0.05)
        return show

    monkeypatch.setattr(ShowRepository, "get", slow_get)


def _run_in_threads(sessions, count, call):
    barrier = threading.Barrier(count)
    results, errors = [], []

    def worker():
        barrier.wait()
        session = sessions()
        try:
            results.append(call(ShowBookingService(Store(session))))
            session.commit()
        except Exception as exc:
            session.rollback()
            errors.append(exc)
        finally:
            session.close()

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results, errors


def test_parallel_bookings_never_oversell(file_sessions, slow_show_reads):
    with file_sessions() as session:
        show = ShowBookingService(Store(session)).add_show(
            ShowPayload(title="Hamlet", genre="Drama", total_tickets=10)
        )
        session.commit()

    bookings, errors = _run_in_threads(
        file_sessions,
        3,
        lambda service: service.add_booking(
            BookingPayload(show_id=show.id, user_id=1, num_tickets=4)
        ),
    )

    assert len(bookings) == 2
    assert len(errors) == 1
    assert isinstance(errors[0], NotEnoughTicketsError)
    assert len({booking.id for booking in bookings}) == 2

    with file_sessions() as session:
        service = ShowBookingService(Store(session))
        assert service.get_remaining_tickets(show.id) == 2


def test_parallel_show_creation_gets_distinct_ids(file_sessions, slow_show_reads):
    shows, errors = _run_in_threads(
        file_sessions,
        4,
        lambda service: service.add_show(
            ShowPayload(title="Hamlet", genre="Drama", total_tickets=5)
        ),
    )

    assert errors == []
    assert sorted(show.id for show in shows) == [0, 1, 2, 3]
