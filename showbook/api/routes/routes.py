import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from showbook.infrastructure.db.session import SessionLocal
from showbook.infrastructure.store import Store
from showbook.application.booking_service import ShowBookingService
from showbook.api.schemas.schemas import (
    BookingRequest,
    BookingResponse,
    RemainingTicketsResponse,
    ShowRequest,
    ShowResponse,
)
from showbook.domain.exceptions import (
    InvalidInputError,
    NotEnoughTicketsError,
    NotFoundError,
    RecordTooLargeError,
    ShowBookingError,
    TicketCountOverflowError,
)


router = APIRouter()
logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    NotEnoughTicketsError: status.HTTP_409_CONFLICT,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    RecordTooLargeError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    TicketCountOverflowError: status.HTTP_409_CONFLICT,
}


def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_service(db: Session = Depends(get_db)) -> ShowBookingService:
    return ShowBookingService(Store(db))


def _http_error(exc: ShowBookingError) -> HTTPException:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))

    logger.error("Unmapped domain error: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc),
    )


@router.get("/health")
def health():
    return {"message": "Show booking service is running"}


# -----------------------------
# Shows
# -----------------------------
@router.get("/shows/{show_id}", response_model=ShowResponse)
def get_show(
    show_id: int,
    service: ShowBookingService = Depends(get_service),
):
    try:
        show = service.get_show(show_id)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return ShowResponse(**show.model_dump())


@router.post("/shows", response_model=ShowResponse)
def add_show(
    request: ShowRequest,
    service: ShowBookingService = Depends(get_service),
):
    try:
        show = service.add_show(request)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return ShowResponse(**show.model_dump())


@router.put("/shows/{show_id}", response_model=ShowResponse)
def update_show(
    show_id: int,
    request: ShowRequest,
    service: ShowBookingService = Depends(get_service),
):
    try:
        show = service.update_show(show_id, request)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return ShowResponse(**show.model_dump())


@router.delete("/shows/{show_id}", response_model=ShowResponse)
def delete_show(
    show_id: int,
    service: ShowBookingService = Depends(get_service),
):
    try:
        show = service.delete_show(show_id)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return ShowResponse(**show.model_dump())


@router.get(
    "/shows/{show_id}/remaining-tickets",
    response_model=RemainingTicketsResponse,
)
def get_remaining_tickets(
    show_id: int,
    service: ShowBookingService = Depends(get_service),
):
    try:
        available = service.get_remaining_tickets(show_id)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return RemainingTicketsResponse(show_id=show_id, available_tickets=available)


# -----------------------------
# Bookings
# -----------------------------
@router.get("/bookings/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    service: ShowBookingService = Depends(get_service),
):
    try:
        booking = service.get_booking(booking_id)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return BookingResponse(**booking.model_dump())


@router.post("/bookings", response_model=BookingResponse)
def add_booking(
    request: BookingRequest,
    service: ShowBookingService = Depends(get_service),
):
    try:
        booking = service.add_booking(request)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return BookingResponse(**booking.model_dump())


@router.put("/bookings/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: int,
    request: BookingRequest,
    service: ShowBookingService = Depends(get_service),
):
    try:
        booking = service.update_booking(booking_id, request)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return BookingResponse(**booking.model_dump())


@router.delete("/bookings/{booking_id}", response_model=BookingResponse)
def delete_booking(
    booking_id: int,
    service: ShowBookingService = Depends(get_service),
):
    try:
        booking = service.delete_booking(booking_id)
    except ShowBookingError as exc:
        raise _http_error(exc) from exc

    return BookingResponse(**booking.model_dump())
