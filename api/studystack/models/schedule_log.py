"""
ScheduleLogEntry model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from pydantic import NaiveDatetime

from studystack.utils.time_utils import utcnow

if TYPE_CHECKING:
    from studystack.models.card import Card


class ScheduleLogEntry(SQLModel, table=True):
    """One staged-scheduler transition of a card."""
    __tablename__ = "schedule_log"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    card_id: int = Field(foreign_key="card.id", index=True)
    date: NaiveDatetime = Field(default_factory=utcnow)
    stage: int  # Stage after the transition
    success: bool
    performance: Optional[float] = None  # Caller-supplied score, stored for analytics only
    
    # Relationships
    card: "Card" = Relationship(back_populates="schedule_log")
