"""
ForgottenBlanks model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON, UniqueConstraint
from typing import Optional, List, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from studystack.models.card import Card


class ForgottenBlanks(SQLModel, table=True):
    """Per-user forgotten token state of a card.
    
    `blanks` is the current session's forgotten set, `stats` maps a blank
    index (as string, JSON keys) to its lifetime forget count.
    """
    __tablename__ = "forgotten_blanks"
    __table_args__ = (UniqueConstraint("card_id", "user_id", name="uq_forgotten_blanks_card_user"),)
    
    id: Optional[int] = Field(default=None, primary_key=True)
    card_id: int = Field(foreign_key="card.id", index=True)
    user_id: str
    blanks: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    stats: Dict[str, int] = Field(default_factory=dict, sa_column=Column(JSON))
    
    # Relationships
    card: "Card" = Relationship(back_populates="forgotten_blanks")
