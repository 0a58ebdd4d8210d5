""" Page size settings """

from __future__ import annotations

import dataclasses
from typing import Optional


@dataclasses.dataclass
class PaginationSettings:
    """ How many rows go into a page

    Example:
        paginate(ssn, stmt, args, settings=PaginationSettings(default_limit=10, max_limit=100))
    """
    # Page size when neither `first` nor `last` is given
    default_limit: int = 25

    # Page size cap. `None`: no cap
    max_limit: Optional[int] = None

    def get_final_limit(self, limit: Optional[int]) -> int:
        """ Get the page size for the requested `limit` """
        if limit is None:
            limit = self.default_limit

        if self.max_limit is not None:
            limit = min(limit, self.max_limit)

        return limit


DEFAULT_SETTINGS = PaginationSettings()
