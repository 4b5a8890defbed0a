"""Shared query helpers for SQLAlchemy repositories."""

from typing import Any, List, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


class SqlAlchemyRepository:
    """Base class holding the unit of work's session."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def _add(self, model: Any) -> Any:
        self._session.add(model)
        await self._session.flush()  # Propagate to DB without committing
        return model

    async def _first(self, stmt: Select) -> Any:
        result = await self._session.execute(
            stmt.execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def _all(self, stmt: Select) -> List[Any]:
        result = await self._session.execute(
            stmt.execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def _paginate(self, stmt: Select, page: int, limit: int) -> Tuple[List[Any], int]:
        """Run `stmt` for one page and count the full result set.

        Args:
            stmt: Ordered select statement
            page: 1-based page number
            limit: Page size

        Returns:
            (rows, total_count)
        """
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = (await self._session.execute(count_stmt)).scalar_one()
        rows = await self._all(stmt.offset((page - 1) * limit).limit(limit))
        return rows, total
