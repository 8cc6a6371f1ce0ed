"""
Bulk seat generation: lay out a rectangular grid of seats under one stand.

Row label = prefix + row index, seat label = 1-based seat index. The grid is
inserted in fixed-size batches, each committed on its own. A failing batch
stops the run but does not undo the batches already committed; the result
tells the operator how many seats made it so they can decide what to retry.
"""

from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.config import get_settings
from cricket_tickets.core.exceptions import ValidationFailedError
from cricket_tickets.core.logging import get_logger
from cricket_tickets.core.metrics import seat_batches_failed, seats_generated
from cricket_tickets.models.venue import Seat
from cricket_tickets.schemas.venue import BulkSeatCreate, BulkSeatResult
from cricket_tickets.services.catalog_service import get_stand

logger = get_logger(__name__)


def _parse_int(value: Union[int, str], field: str) -> int:
    if isinstance(value, bool):
        raise ValidationFailedError(f"{field} must be a whole number")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationFailedError(f"{field} must be a whole number") from None


def plan_seat_grid(
    row_prefix: str,
    start_row: Union[int, str],
    end_row: Union[int, str],
    seats_per_row: Union[int, str],
    max_seats: Optional[int] = None,
) -> list[tuple[str, str]]:
    """
    Validate the bounds and return the (row_label, seat_label) pairs in
    insertion order. Raises ValidationFailedError without side effects.
    """
    start = _parse_int(start_row, "start_row")
    end = _parse_int(end_row, "end_row")
    per_row = _parse_int(seats_per_row, "seats_per_row")

    if start > end:
        raise ValidationFailedError(f"start_row ({start}) must not be greater than end_row ({end})")
    if per_row <= 0:
        raise ValidationFailedError("seats_per_row must be positive")

    total = (end - start + 1) * per_row
    if max_seats is not None and total > max_seats:
        raise ValidationFailedError(f"Grid of {total} seats exceeds the limit of {max_seats}")

    return [
        (f"{row_prefix}{row}", str(seat))
        for row in range(start, end + 1)
        for seat in range(1, per_row + 1)
    ]


async def generate_seats(
    db: AsyncSession,
    stand_id: str,
    data: BulkSeatCreate,
    batch_size: Optional[int] = None,
) -> BulkSeatResult:
    settings = get_settings()
    batch_size = batch_size or settings.SEAT_BATCH_SIZE

    grid = plan_seat_grid(
        data.row_prefix,
        data.start_row,
        data.end_row,
        data.seats_per_row,
        max_seats=settings.MAX_BULK_SEATS,
    )
    await get_stand(db, stand_id)

    created = 0
    error = None
    for offset in range(0, len(grid), batch_size):
        batch = [
            Seat(stand_id=stand_id, row_number=row_label, seat_number=seat_label, status=data.status)
            for row_label, seat_label in grid[offset:offset + batch_size]
        ]
        try:
            db.add_all(batch)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            seat_batches_failed.inc()
            error = f"Failed to add some seats: {e}"
            logger.error(
                "seat_batch_failed",
                stand_id=stand_id,
                batch_offset=offset,
                created=created,
                error=str(e),
            )
            break
        created += len(batch)

    seats_generated.inc(created)
    logger.info(
        "seats_generated",
        stand_id=stand_id,
        requested=len(grid),
        created=created,
        complete=error is None,
    )
    return BulkSeatResult(requested=len(grid), created=created, error=error)
