"""Shared path and query parameter types.

Learn: Ids are bounded to the INTEGER column range, so an out-of-range
number is a validation error (400) instead of a driver overflow.
"""

from typing import Annotated, Optional

from fastapi import Path, Query

MAX_ID = 2_147_483_647

EntityId = Annotated[int, Path(ge=1, le=MAX_ID)]
RoundNumber = Annotated[Optional[int], Query(ge=1, le=MAX_ID)]
