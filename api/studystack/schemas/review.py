"""
Review and scheduling schemas.
"""
from pydantic import BaseModel, Field, StrictBool
from typing import Dict, List, Optional
from datetime import datetime

from studystack.schemas.card import CardResponse


class CardReviewRequest(BaseModel):
    """Legacy per-card review result."""
    remembered: StrictBool


class TopicReviewRequest(BaseModel):
    """Staged review result applied to every card of a topic."""
    success: StrictBool
    performance: Optional[float] = Field(None, description="Caller-supplied score, stored for analytics only")
    
    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "performance": 0.85
            }
        }


class TopicReviewResponse(BaseModel):
    success: bool = True
    updated_count: int


class ReviewTasksResponse(BaseModel):
    """Due cards grouped by topic name."""
    tasks: Dict[str, List[CardResponse]]


class TopicPerformanceResponse(BaseModel):
    total_reviews: int
    correct: int
    accuracy: Optional[float] = None
    last_reviewed: Optional[datetime] = None
