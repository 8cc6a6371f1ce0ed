"""
Match-seat pricer: per-match price and status for every seat of a stand.

An operator works on a PricingSheet (every seat of one stand for one match,
starting from its effective state), edits single seats or applies a
multiplier to the stand's base price, then saves. Saving upserts all entries
keyed by (match, seat) in the caller's transaction, so either every row is
written or none is.

A seat that is already booked keeps its "booked" status through any save;
only a booking cancellation can release it.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from cricket_tickets.core.logging import get_logger
from cricket_tickets.core.metrics import match_seats_saved
from cricket_tickets.db.base import new_id
from cricket_tickets.models.match import MATCH_SEAT_BOOKED, OPERATOR_SEAT_STATUSES
from cricket_tickets.models.venue import Stand
from cricket_tickets.repositories import MatchSeatRepository, SeatRepository
from cricket_tickets.schemas.match import PricingEntry, PricingRowResult, SeatState
from cricket_tickets.services.availability_service import get_stand_for_match, load_seat_states

logger = get_logger(__name__)

CENT = Decimal("0.01")
# Numeric(10, 2)
MAX_PRICE = Decimal("99999999.99")


def to_money(value) -> Decimal:
    """
    Parse an operator-entered price. Rejects anything that is not a finite,
    non-negative number.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationFailedError("Price must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationFailedError("Price must be a finite number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationFailedError(f"Price {value!r} is not a number") from None
    if not amount.is_finite():
        raise ValidationFailedError("Price must be a finite number")
    if amount < 0:
        raise ValidationFailedError("Price must not be negative")
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount > MAX_PRICE:
        raise ValidationFailedError("Price is too large")
    return amount


def priced_from_base(base_price: Decimal, multiplier) -> Decimal:
    try:
        factor = Decimal(str(multiplier))
    except InvalidOperation:
        raise ValidationFailedError(f"Multiplier {multiplier!r} is not a number") from None
    if not factor.is_finite() or factor <= 0:
        raise ValidationFailedError("Multiplier must be greater than zero")
    price = (Decimal(base_price) * factor).quantize(CENT, rounding=ROUND_HALF_UP)
    if price > MAX_PRICE:
        raise ValidationFailedError("Multiplied price is too large")
    return price


def _check_operator_status(status: str) -> str:
    if status not in OPERATOR_SEAT_STATUSES:
        raise ValidationFailedError(
            f"Status must be one of {', '.join(OPERATOR_SEAT_STATUSES)}"
        )
    return status


@dataclass
class SheetEntry:
    seat_id: str
    row_number: str
    seat_number: str
    price: Decimal
    status: str
    match_seat_id: Optional[str] = None


class PricingSheet:
    """Pending per-seat edits for one (match, stand)."""

    def __init__(self, match_id: str, stand: Stand, states: Iterable[SeatState]):
        self.match_id = match_id
        self.stand_id = stand.id
        self.base_price = Decimal(stand.base_price)
        self._entries: dict[str, SheetEntry] = {
            state.seat_id: SheetEntry(
                seat_id=state.seat_id,
                row_number=state.row_number,
                seat_number=state.seat_number,
                price=Decimal(state.price),
                status=state.status,
                match_seat_id=state.match_seat_id,
            )
            for state in states
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, seat_id: str) -> bool:
        return seat_id in self._entries

    def entry(self, seat_id: str) -> SheetEntry:
        try:
            return self._entries[seat_id]
        except KeyError:
            raise NotFoundError(f"Seat {seat_id} is not in stand {self.stand_id}") from None

    def entries(self) -> list[SheetEntry]:
        return list(self._entries.values())

    def set_price(self, seat_id: str, value) -> None:
        entry = self.entry(seat_id)
        entry.price = to_money(value)

    def set_status(self, seat_id: str, status: str) -> None:
        entry = self.entry(seat_id)
        if entry.status == MATCH_SEAT_BOOKED and status != MATCH_SEAT_BOOKED:
            raise ConflictError("Seat is booked; cancel the booking to release it")
        entry.status = _check_operator_status(status)

    def apply_multiplier(self, multiplier) -> Decimal:
        """Overwrite every seat's price with base_price * multiplier."""
        price = priced_from_base(self.base_price, multiplier)
        for entry in self._entries.values():
            entry.price = price
        return price

    def to_save_entries(self) -> list[PricingEntry]:
        # Booked rows are saved with their price only; the status here is ignored.
        return [
            PricingEntry(
                seat_id=entry.seat_id,
                price=entry.price,
                status=entry.status if entry.status != MATCH_SEAT_BOOKED else "available",
            )
            for entry in self._entries.values()
        ]


async def load_pricing_sheet(db: AsyncSession, match_id: str, stand_id: str) -> PricingSheet:
    match, stand = await get_stand_for_match(db, match_id, stand_id)
    states = await load_seat_states(db, match.id, stand)
    return PricingSheet(match.id, stand, states)


async def _upsert_entry(
    match_seats: MatchSeatRepository,
    match_id: str,
    seat_id: str,
    price: Decimal,
    status: str,
) -> str:
    inserted = await match_seats.insert_if_absent(
        {
            "id": new_id(),
            "match_id": match_id,
            "seat_id": seat_id,
            "price": price,
            "status": status,
            "version": 1,
        }
    )
    if inserted:
        return "created"
    written = await match_seats.set_price_and_status(
        match_id, seat_id, price, status, protected_status=MATCH_SEAT_BOOKED
    )
    if not written:
        # Booked (possibly a moment ago): keep the booking, take the price.
        await match_seats.set_price(match_id, seat_id, price)
    return "updated"


async def save_pricing(
    db: AsyncSession,
    match_id: str,
    stand_id: str,
    entries: list[PricingEntry],
) -> list[PricingRowResult]:
    """
    Upsert the given entries for one stand. All entries are validated before
    the first write. The caller's transaction makes the save all-or-nothing.
    """
    match, stand = await get_stand_for_match(db, match_id, stand_id)
    stand_seat_ids = {seat.id for seat in await SeatRepository(db).list_by_stand(stand.id)}

    validated = []
    for entry in entries:
        if entry.seat_id not in stand_seat_ids:
            raise ValidationFailedError(f"Seat {entry.seat_id} does not belong to stand {stand.id}")
        validated.append((entry.seat_id, to_money(entry.price), _check_operator_status(entry.status)))

    match_seats = MatchSeatRepository(db)
    results = []
    for seat_id, price, status in validated:
        action = await _upsert_entry(match_seats, match.id, seat_id, price, status)
        match_seats_saved.labels(action=action).inc()
        results.append(PricingRowResult(seat_id=seat_id, action=action))

    await db.flush()
    logger.info(
        "pricing_saved",
        match_id=match.id,
        stand_id=stand.id,
        created=sum(1 for r in results if r.action == "created"),
        updated=sum(1 for r in results if r.action == "updated"),
    )
    return results


async def edit_seat(
    db: AsyncSession,
    match_id: str,
    seat_id: str,
    price=None,
    status: Optional[str] = None,
) -> PricingRowResult:
    """Set price and/or status of one seat for one match, saved immediately."""
    seat = await SeatRepository(db).get(seat_id)
    if not seat:
        raise NotFoundError(f"Seat {seat_id} not found")
    sheet = await load_pricing_sheet(db, match_id, seat.stand_id)

    if price is not None:
        sheet.set_price(seat_id, price)
    if status is not None:
        sheet.set_status(seat_id, status)

    entry = sheet.entry(seat_id)
    save_status = entry.status if entry.status != MATCH_SEAT_BOOKED else "available"
    results = await save_pricing(
        db,
        match_id,
        seat.stand_id,
        [PricingEntry(seat_id=seat_id, price=entry.price, status=save_status)],
    )
    return results[0]


async def apply_price_multiplier(
    db: AsyncSession,
    match_id: str,
    stand_id: str,
    multiplier,
) -> list[PricingRowResult]:
    """Price every seat of the stand at base_price * multiplier and save."""
    sheet = await load_pricing_sheet(db, match_id, stand_id)
    price = sheet.apply_multiplier(multiplier)
    logger.info(
        "bulk_price_applied",
        match_id=match_id,
        stand_id=stand_id,
        multiplier=str(multiplier),
        price=str(price),
        seats=len(sheet),
    )
    return await save_pricing(db, match_id, stand_id, sheet.to_save_entries())
