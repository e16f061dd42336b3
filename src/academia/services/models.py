"""Data models for the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from academia.query_builder import QueryBuilder
    from academia.records import Database


@dataclass
class Page:
    """One page of serialized records plus pagination metadata.

    Attributes:
        data: Records serialized with the requested projection.
        meta: page, limit, total and total_page.
    """

    data: list[dict[str, Any]]
    meta: dict[str, int]

    @classmethod
    def fetch(cls, db: Database, builder: QueryBuilder) -> Page:
        """Execute a built query and its count in one session."""
        with db.session_scope() as session:
            records = session.execute(builder.query).scalars().all()
            total = session.execute(builder.count_query()).scalar_one()
            data = [record.to_dict(builder.projection) for record in records]
        return cls(data=data, meta=builder.meta(total))
