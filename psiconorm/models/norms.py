from __future__ import annotations

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from psiconorm.db.database import Base

__all__ = [
    "NormativeTable",
    "NormativeRow",
]


class NormativeTable(Base):
    __tablename__ = "normative_tables"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    instrument: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    version: Mapped[str] = mapped_column(String(20), default="1.0", nullable=False)
    criterion: Mapped[str | None] = mapped_column(String(20), nullable=True)
    criterion_value: Mapped[str | None] = mapped_column(String(60), nullable=True)
    subscale: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_generic: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    rows: Mapped[list["NormativeRow"]] = relationship(
        back_populates="table",
        cascade="all, delete-orphan",
        order_by="NormativeRow.id",
    )


class NormativeRow(Base):
    __tablename__ = "normative_rows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    table_id: Mapped[int] = mapped_column(ForeignKey("normative_tables.id", ondelete="CASCADE"), nullable=False)
    subscale: Mapped[str | None] = mapped_column(String(20), nullable=True)
    lower_bound: Mapped[float] = mapped_column(Float, nullable=False)
    upper_bound: Mapped[float | None] = mapped_column(Float, nullable=True)
    percentile: Mapped[int] = mapped_column(Integer, nullable=False)
    classification: Mapped[str] = mapped_column(String(40), nullable=False)
    criterion_value: Mapped[str | None] = mapped_column(String(60), nullable=True)

    table: Mapped[NormativeTable] = relationship(back_populates="rows")

    __table_args__ = (
        UniqueConstraint(
            "table_id",
            "subscale",
            "criterion_value",
            "percentile",
            name="uq_normative_row_band",
        ),
        Index("ix_normative_rows_table_subscale", "table_id", "subscale"),
    )
