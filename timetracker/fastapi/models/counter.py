"""
Counter model for named integer sequences.

Rows are incremented in place by the store, so two transactions never
read the same next value.
"""

from sqlalchemy import Column, String, Integer

from timetracker.fastapi.dependencies.database import Base


class Counter(Base):
    """Named monotonically increasing sequence (e.g. employee numbers)."""

    __tablename__ = "counters"

    name = Column(String(50), primary_key=True, doc="Sequence name")
    value = Column(Integer, nullable=False, default=0, doc="Last value handed out")

    def __repr__(self) -> str:
        return f"<Counter(name='{self.name}', value={self.value})>"
