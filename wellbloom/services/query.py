"""
WellBloom Backend: Composable Listing Queries
==============================================

What:  A tiny query-builder used by every filtered or paginated listing.
Why:   Filtered lists need the same predicates twice: once for the page of
       rows and once for the total count. Building both from one predicate
       list keeps them consistent, so `pagination.total` always matches the
       filter regardless of the page window.
How:
    Criteria  ordered list of SQLAlchemy boolean expressions
    Page      limit/offset window (from offset or from a 1-based page number)
    fetch_page(db, stmt, criteria, page, count_from) -> (rows, total)

Example:
    criteria = Criteria().where(Report.admin_id == 3).where_if(
        answered is not None, Report.answer.is_not(None)
    )
    rows, total = await fetch_page(
        db,
        select(Report).options(joinedload(Report.admin)).order_by(Report.id.desc()),
        criteria,
        Page(limit=10, offset=0),
        count_from=Report,
    )
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement


class Criteria:
    """Ordered collection of WHERE predicates, applied with AND."""

    def __init__(self, *predicates: ColumnElement[bool]):
        self._predicates: List[ColumnElement[bool]] = list(predicates)

    def where(self, predicate: ColumnElement[bool]) -> "Criteria":
        self._predicates.append(predicate)
        return self

    def where_if(self, condition: Any, predicate: ColumnElement[bool]) -> "Criteria":
        """Add the predicate only when condition is truthy."""
        if condition:
            self._predicates.append(predicate)
        return self

    @property
    def predicates(self) -> Sequence[ColumnElement[bool]]:
        return tuple(self._predicates)

    def apply(self, stmt: Select) -> Select:
        for predicate in self._predicates:
            stmt = stmt.where(predicate)
        return stmt

    def __len__(self) -> int:
        return len(self._predicates)


@dataclass(frozen=True)
class Page:
    """
    Offset/limit window.

    Emotions paginate by page number, everything else by offset; both
    reduce to the same limit/offset pair.
    """

    limit: int
    offset: int = 0
    number: Optional[int] = None

    @classmethod
    def from_number(cls, number: int, limit: int) -> "Page":
        number = max(number, 1)
        return cls(limit=limit, offset=(number - 1) * limit, number=number)

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit) if self.limit else 0


async def count(db: AsyncSession, criteria: Criteria, count_from: Any) -> int:
    """COUNT(*) over count_from filtered by criteria."""
    stmt = criteria.apply(select(func.count()).select_from(count_from))
    result = await db.execute(stmt)
    return int(result.scalar() or 0)


async def fetch_page(
    db: AsyncSession,
    stmt: Select,
    criteria: Criteria,
    page: Page,
    count_from: Any,
) -> Tuple[List[Any], int]:
    """
    Run a filtered, windowed query plus its independent total count.

    Args:
        stmt:        base SELECT (entity, eager loads, ORDER BY)
        criteria:    predicates shared by the page query and the count
        page:        limit/offset window applied to stmt only
        count_from:  table or entity the COUNT(*) runs over

    Returns:
        (rows for this page, total rows matching criteria)
    """
    page_stmt = criteria.apply(stmt).limit(page.limit).offset(page.offset)
    result = await db.execute(page_stmt)
    rows = list(result.unique().scalars().all())
    total = await count(db, criteria, count_from)
    return rows, total
