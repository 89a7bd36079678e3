"""
Card schemas.
"""
from pydantic import BaseModel, Field, StrictInt
from typing import List, Optional
from datetime import datetime

from studystack.models.card import Card
from studystack.utils.text_utils import valid_keyword_indices


class ReviewHistoryResponse(BaseModel):
    """Legacy review log entry."""
    date: datetime
    remembered: bool
    
    class Config:
        from_attributes = True


class ScheduleLogResponse(BaseModel):
    """Staged scheduler log entry."""
    date: datetime
    stage: int
    success: bool
    performance: Optional[float] = None
    
    class Config:
        from_attributes = True


class ReviewScheduleResponse(BaseModel):
    """Staged scheduler state of a card."""
    current_stage: int = 0
    next_review: Optional[datetime] = None
    log: List[ScheduleLogResponse] = []


class CardResponse(BaseModel):
    """Card response schema."""
    id: int
    subject: str
    module: Optional[str] = None
    chapter: Optional[str] = None
    section: Optional[str] = None
    topic: Optional[str] = None
    content: str
    keywords: List[int] = []
    order: int = 0
    next_review: Optional[datetime] = None
    review_history: List[ReviewHistoryResponse] = []
    review_schedule: ReviewScheduleResponse
    created_by: str
    created_at: Optional[datetime] = None
    
    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        """Build the response, dropping keyword indices that no longer address a token."""
        return cls(
            id=card.id,
            subject=card.subject,
            module=card.module,
            chapter=card.chapter,
            section=card.section,
            topic=card.topic,
            content=card.content,
            keywords=valid_keyword_indices(card.keywords or [], card.content),
            order=card.order,
            next_review=card.next_review,
            review_history=[ReviewHistoryResponse.model_validate(entry) for entry in card.review_history],
            review_schedule=ReviewScheduleResponse(
                current_stage=card.schedule_stage,
                next_review=card.schedule_next_review,
                log=[ScheduleLogResponse.model_validate(entry) for entry in card.schedule_log],
            ),
            created_by=card.created_by,
            created_at=card.created_at,
        )


class AddCardRequest(BaseModel):
    """Request schema for adding a card to a topic."""
    content: str = Field(..., description="Text of the fact")


class PathFields(BaseModel):
    """Taxonomy path given in a request body; only the subject is required."""
    subject: str = Field(..., description="Subject name")
    module: Optional[str] = None
    chapter: Optional[str] = None
    section: Optional[str] = None
    topic: Optional[str] = None


class SubmitRawRequest(PathFields):
    """Request schema for raw text submission."""
    raw_text: str = Field(..., description="Raw study text")
    
    class Config:
        json_schema_extra = {
            "example": {
                "subject": "Bio",
                "module": "Animals",
                "chapter": "Mammals",
                "section": "Pets",
                "topic": "Cats",
                "raw_text": "Cats are mammals. Cats can purr.\n\nDogs bark."
            }
        }


class IngestResponse(BaseModel):
    """Cards created from raw text."""
    created: List[CardResponse]


class UpdateContentRequest(BaseModel):
    content: str


class UpdateKeywordsRequest(BaseModel):
    keywords: List[StrictInt] = Field(..., description="Token indices to emphasize")


class UpdateOrderRequest(BaseModel):
    order: StrictInt


class ReorderCardsRequest(BaseModel):
    """Request schema for reordering the cards of a topic."""
    card_ids: List[StrictInt] = Field(..., description="Card IDs in their new order")


class ReorderCardsResponse(BaseModel):
    success: bool = True
    modified_count: int


class SuccessResponse(BaseModel):
    success: bool = True
