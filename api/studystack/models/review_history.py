"""
ReviewHistoryEntry model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from pydantic import NaiveDatetime

from studystack.utils.time_utils import utcnow

if TYPE_CHECKING:
    from studystack.models.card import Card


class ReviewHistoryEntry(SQLModel, table=True):
    """Append-only per-card log written by the legacy review endpoints."""
    __tablename__ = "review_history"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    card_id: int = Field(foreign_key="card.id", index=True)
    date: NaiveDatetime = Field(default_factory=utcnow)
    remembered: bool
    
    # Relationships
    card: "Card" = Relationship(back_populates="review_history")
