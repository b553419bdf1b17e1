"""Identifier generation for new string resources."""

import random
from typing import Iterable, Optional

from loguru import logger

from ..config import MAX_STRING_ID
from ..errors import IdentifierSpaceExhaustedError

DEFAULT_ID_RANGE = (1, MAX_STRING_ID)

DEFAULT_MAX_ATTEMPTS = 10000


def next_id(
    existing_ids: Iterable[int],
    sequential: bool,
    *,
    first_id: int = 1,
    id_range: tuple[int, int] = DEFAULT_ID_RANGE,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    reserved_ids: Iterable[int] = (),
    rng: Optional[random.Random] = None
) -> int:
    """Produce an id that is not in ``existing_ids``.

    Args:
        existing_ids: Ids already used by the string table.
        sequential: Return the id following the largest one instead of a
            random one.
        first_id: Id returned in sequential mode for an empty table.
        id_range: Inclusive bounds of the random draw.
        max_attempts: Draws attempted before giving up in random mode.
        reserved_ids: Ids owned by other symbols. They are never returned but
            do not move the sequential counter.
        rng: Random generator, defaults to the module one.

    Returns:
        A free id.

    Raises:
        IdentifierSpaceExhaustedError: When no free id can be produced.
    """
    used = set(existing_ids)
    reserved = set(reserved_ids)

    if sequential:
        candidate = max(used) + 1 if used else first_id
        while candidate in reserved:
            candidate += 1
        if candidate > MAX_STRING_ID:
            raise IdentifierSpaceExhaustedError(
                f"Next sequential id {candidate} exceeds {MAX_STRING_ID}"
            )
        return candidate

    low, high = id_range
    if low < 1 or high < low:
        raise ValueError(f"Invalid id range {low}..{high}")

    used |= reserved
    taken = sum(1 for value in used if low <= value <= high)
    if taken >= high - low + 1:
        raise IdentifierSpaceExhaustedError(
            f"Every id between {low} and {high} is already used"
        )

    draw = rng or random
    for attempt in range(1, max_attempts + 1):
        candidate = draw.randint(low, high)
        if candidate not in used:
            logger.debug(f"Drew id {candidate} after {attempt} attempt(s)")
            return candidate

    raise IdentifierSpaceExhaustedError(
        f"No free id between {low} and {high} found in {max_attempts} attempts"
    )
