"""Lodging block detection over nightly accommodation expenses.

A multi-night stay is stored as one accommodation expense per night, all
sharing the booking name as their description. This module groups those
rows back into consecutive blocks, the same way consecutive on-site days
are grouped into trips:

- Filter to accommodation rows with the booking name
- Sort by day number
- Start a new block wherever the day number jumps by more than one
- Pick the block that contains the day of interest
"""

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from tripbudget.calculators.date_utils import day_number_to_date
from tripbudget.models.expense import Expense

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass
class LodgingBlock:
    """A detected multi-night lodging booking.

    Attributes:
        lodging_name: Booking name shared by all nights
        url: Booking link of the night the block was resolved from
        check_in_date: Date of the first night (None on undated trips)
        check_out_date: Day after the last night (None on undated trips)
        nightly_rate: Cost of one night
        total_cost: Nightly rate times number of nights
        day_numbers: Day numbers of every night, ascending
    """

    lodging_name: str
    url: Optional[str]
    check_in_date: Optional[dt.date]
    check_out_date: Optional[dt.date]
    nightly_rate: Decimal
    total_cost: Decimal
    day_numbers: List[int]

    @property
    def nights(self) -> int:
        return len(self.day_numbers)


def find_consecutive_blocks(expenses: Iterable[Expense]) -> List[List[Expense]]:
    """Group expenses into runs of consecutive day numbers.

    Rows without a day number are ignored. The input should already be
    restricted to a single booking name.

    Args:
        expenses: Expenses to group

    Returns:
        List of blocks, each sorted by day number

    Example:
        >>> blocks = find_consecutive_blocks(rows_on_days_2_3_4_6_7)
        >>> [[e.day_number for e in b] for b in blocks]
        [[2, 3, 4], [6, 7]]
    """
    dated = sorted(
        (e for e in expenses if e.day_number is not None),
        key=lambda e: e.day_number,
    )

    blocks: List[List[Expense]] = []
    current_block: List[Expense] = []

    for expense in dated:
        if not current_block or expense.day_number == current_block[-1].day_number + 1:
            current_block.append(expense)
        else:
            blocks.append(current_block)
            current_block = [expense]

    # The final block needs no trailing gap
    if current_block:
        blocks.append(current_block)

    return blocks


def resolve_lodging_block(
    expenses: Iterable[Expense], day_number: int
) -> Optional[LodgingBlock]:
    """Find the multi-night booking that covers a given day.

    Args:
        expenses: All expenses of the trip (any category)
        day_number: Day whose lodging is of interest

    Returns:
        The LodgingBlock containing ``day_number``, or None when the day has
        no accommodation or its booking covers a single night only
    """
    accommodation = [e for e in expenses if e.is_accommodation]

    current = next((e for e in accommodation if e.day_number == day_number), None)
    if current is None:
        return None

    same_booking = [e for e in accommodation if e.description == current.description]

    block = next(
        (
            b
            for b in find_consecutive_blocks(same_booking)
            if any(e.day_number == day_number for e in b)
        ),
        [],
    )

    if len(block) < 2:
        logger.debug(
            f"Day {day_number} lodging '{current.description}' is not a "
            f"multi-night booking"
        )
        return None

    nightly_rate = current.cost
    first, last = block[0], block[-1]

    return LodgingBlock(
        lodging_name=current.description,
        url=current.url,
        check_in_date=first.date,
        check_out_date=(
            day_number_to_date(last.date, 2) if last.date is not None else None
        ),
        nightly_rate=nightly_rate,
        total_cost=(nightly_rate * len(block)).quantize(CENTS, rounding=ROUND_HALF_UP),
        day_numbers=[e.day_number for e in block],
    )


def list_lodging_blocks(expenses: Iterable[Expense]) -> List[LodgingBlock]:
    """Every accommodation booking on a trip, single nights included.

    Args:
        expenses: All expenses of the trip

    Returns:
        Blocks ordered by their first day number
    """
    accommodation = [e for e in expenses if e.is_accommodation]
    names = sorted({e.description for e in accommodation})

    blocks: List[LodgingBlock] = []
    for name in names:
        for block in find_consecutive_blocks(
            e for e in accommodation if e.description == name
        ):
            first, last = block[0], block[-1]
            blocks.append(
                LodgingBlock(
                    lodging_name=name,
                    url=first.url,
                    check_in_date=first.date,
                    check_out_date=(
                        day_number_to_date(last.date, 2)
                        if last.date is not None
                        else None
                    ),
                    nightly_rate=first.cost,
                    total_cost=sum((e.cost for e in block), Decimal("0")).quantize(
                        CENTS, rounding=ROUND_HALF_UP
                    ),
                    day_numbers=[e.day_number for e in block],
                )
            )

    return sorted(blocks, key=lambda b: b.day_numbers[0])
