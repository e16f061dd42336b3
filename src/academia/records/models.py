"""SQLAlchemy models for academic records."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
    inspect,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

if TYPE_CHECKING:
    from collections.abc import Iterable


class SemesterName(StrEnum):
    """Academic term names."""

    AUTUMN = "Autumn"
    SUMMER = "Summer"
    FALL = "Fall"


class SemesterCode(StrEnum):
    """Academic term codes, paired 1:1 with SemesterName."""

    AUTUMN = "01"
    SUMMER = "02"
    FALL = "03"


class Month(StrEnum):
    """Calendar months used for semester boundaries."""

    JANUARY = "January"
    FEBRUARY = "February"
    MARCH = "March"
    APRIL = "April"
    MAY = "May"
    JUNE = "June"
    JULY = "July"
    AUGUST = "August"
    SEPTEMBER = "September"
    OCTOBER = "October"
    NOVEMBER = "November"
    DECEMBER = "December"


class RegistrationStatus(StrEnum):
    """Semester registration lifecycle status."""

    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    ENDED = "ENDED"


SEMESTER_NAME_CODE_MAP: dict[SemesterName, SemesterCode] = {
    SemesterName.AUTUMN: SemesterCode.AUTUMN,
    SemesterName.SUMMER: SemesterCode.SUMMER,
    SemesterName.FALL: SemesterCode.FALL,
}

DEFAULT_MIN_CREDIT = 3
DEFAULT_MAX_CREDIT = 15


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def to_naive_utc(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC as stored by SQLite."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""

    # Internal fields left out of serialized output unless explicitly requested
    hidden_fields = frozenset({"version"})

    @classmethod
    def field_names(cls) -> list[str]:
        """All mapped attribute names (columns and relationships)."""
        return [attr.key for attr in inspect(cls).attrs]

    @classmethod
    def default_fields(cls) -> list[str]:
        """Attribute names serialized when no projection is requested."""
        return [name for name in cls.field_names() if name not in cls.hidden_fields]

    def to_dict(self, fields: Iterable[str] | None = None) -> dict[str, Any]:
        """Serialize loaded attributes.

        Attributes that were never loaded (deferred by a projection, or a
        relationship that was not eager-loaded) are skipped rather than
        triggering a lazy load.

        Args:
            fields: Attribute names to include. Defaults to default_fields().

        Returns:
            Mapping of attribute name to value. Related records are nested.
        """
        state = inspect(self)
        known = set(self.field_names())
        names = list(fields) if fields is not None else self.default_fields()

        result: dict[str, Any] = {}
        for name in names:
            if name not in known or name in state.unloaded:
                continue
            value = getattr(self, name)
            if isinstance(value, Base):
                value = value.to_dict()
            result[name] = value
        return result


class AcademicSemester(Base):
    """Academic semester - one term of one year."""

    __tablename__ = "academic_semesters"
    __table_args__ = (UniqueConstraint("name", "year", name="uq_academic_semester_name_year"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    code: Mapped[str] = mapped_column(String(2), nullable=False)
    start_month: Mapped[str] = mapped_column(String(20), nullable=False)
    end_month: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}  # noqa: RUF012

    def __init__(
        self,
        name: str,
        year: int,
        code: str,
        start_month: str,
        end_month: str,
        id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.name = name
        self.year = year
        self.code = code
        self.start_month = start_month
        self.end_month = end_month

    def __repr__(self) -> str:
        return f"<AcademicSemester(id={self.id!r}, name={self.name!r}, year={self.year!r})>"


class SemesterRegistration(Base):
    """Semester registration - the enrollment window of one academic semester."""

    __tablename__ = "semester_registrations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    academic_semester_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("academic_semesters.id"), nullable=False, unique=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    min_credit: Mapped[int] = mapped_column(Integer, nullable=False)
    max_credit: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    academic_semester: Mapped[AcademicSemester] = relationship("AcademicSemester")

    __mapper_args__ = {"version_id_col": version}  # noqa: RUF012

    def __init__(
        self,
        academic_semester_id: str,
        start_date: datetime,
        end_date: datetime,
        id: str | None = None,
        status: str | None = None,
        min_credit: int = DEFAULT_MIN_CREDIT,
        max_credit: int = DEFAULT_MAX_CREDIT,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.academic_semester_id = academic_semester_id
        self.status = status if status is not None else RegistrationStatus.UPCOMING.value
        self.start_date = start_date
        self.end_date = end_date
        self.min_credit = min_credit
        self.max_credit = max_credit

    @property
    def registration_status(self) -> RegistrationStatus:
        """Get status as RegistrationStatus enum."""
        return RegistrationStatus(self.status)

    def __repr__(self) -> str:
        return (
            f"<SemesterRegistration(id={self.id!r}, "
            f"academic_semester_id={self.academic_semester_id!r}, status={self.status!r})>"
        )
