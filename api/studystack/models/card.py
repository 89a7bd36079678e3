"""
Card model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Optional, List, TYPE_CHECKING
from pydantic import NaiveDatetime

from studystack.utils.time_utils import utcnow

if TYPE_CHECKING:
    from studystack.models.review_history import ReviewHistoryEntry
    from studystack.models.schedule_log import ScheduleLogEntry
    from studystack.models.forgotten_blanks import ForgottenBlanks


class Card(SQLModel, table=True):
    """Card table - one atomic fact, carrying its full taxonomy path."""
    __tablename__ = "card"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    
    # Denormalized path; intermediate levels exist only as shared prefixes
    subject: str = Field(index=True)
    module: Optional[str] = Field(default=None, index=True)
    chapter: Optional[str] = None
    section: Optional[str] = None
    topic: Optional[str] = Field(default=None, index=True)
    
    content: str
    keywords: List[int] = Field(default_factory=list, sa_column=Column(JSON))  # Token indices into content
    order: int = Field(default=0)
    
    # Legacy scalar scheduler
    next_review: Optional[NaiveDatetime] = None
    
    # Staged scheduler
    schedule_stage: int = Field(default=0)  # 0 = not started
    schedule_next_review: Optional[NaiveDatetime] = Field(default=None, index=True)
    
    created_by: str = Field(index=True)
    created_at: NaiveDatetime = Field(default_factory=utcnow)
    
    # Relationships
    review_history: List["ReviewHistoryEntry"] = Relationship(
        back_populates="card",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "ReviewHistoryEntry.id", "lazy": "selectin"},
    )
    schedule_log: List["ScheduleLogEntry"] = Relationship(
        back_populates="card",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "ScheduleLogEntry.id", "lazy": "selectin"},
    )
    forgotten_blanks: List["ForgottenBlanks"] = Relationship(
        back_populates="card",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    @property
    def path(self) -> tuple:
        return (self.subject, self.module, self.chapter, self.section, self.topic)
