"""
Review endpoints for both schedulers and the due-set queries.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import List, Optional

from studystack.core.database import get_session
from studystack.schemas.card import CardResponse
from studystack.schemas.review import (
    CardReviewRequest,
    TopicReviewRequest,
    TopicReviewResponse,
    ReviewTasksResponse,
    TopicPerformanceResponse,
)
from studystack.services import srs_service
from studystack.api.v1.endpoints.utils import (
    get_current_user_id,
    card_responses,
    grouped_card_responses,
)

router = APIRouter(tags=["reviews"])


@router.patch("/cards/{card_id}/review", response_model=CardResponse)
async def review_card(
    card_id: int,
    request: CardReviewRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Record a legacy review result: next review in 3 days if remembered, else 1 day."""
    card = srs_service.submit_card_review(session, user_id, card_id, request.remembered)
    return CardResponse.from_card(card)


@router.post("/card-review/{card_id}", response_model=CardResponse)
async def graduated_card_review(
    card_id: int,
    request: CardReviewRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Record a legacy review result with intervals growing per earlier review."""
    card = srs_service.submit_graduated_card_review(session, user_id, card_id, request.remembered)
    return CardResponse.from_card(card)


@router.post("/topics/{topic}/review", response_model=TopicReviewResponse)
async def submit_topic_review(
    topic: str,
    request: TopicReviewRequest,
    subject: Optional[str] = None,
    module: Optional[str] = None,
    chapter: Optional[str] = None,
    section: Optional[str] = None,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """
    Advance the staged schedule of every card in a topic.
    
    Cards are matched by topic name; optional subject/module/chapter/section
    query parameters restrict the match to one branch.
    """
    updated_count = srs_service.submit_topic_review(
        session,
        user_id,
        topic,
        request.success,
        request.performance,
        subject=subject,
        module=module,
        chapter=chapter,
        section=section,
    )
    return TopicReviewResponse(updated_count=updated_count)


@router.get("/review-cards", response_model=List[CardResponse])
async def get_review_cards(
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Get cards due for review by the legacy scheduler."""
    return card_responses(srs_service.due_review_cards(session, user_id))


@router.get("/review-tasks", response_model=ReviewTasksResponse)
async def get_review_tasks(
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Get cards due now, grouped by topic."""
    groups = srs_service.review_tasks_today(session, user_id)
    return ReviewTasksResponse(tasks=grouped_card_responses(groups))


@router.get("/review-tasks/tomorrow", response_model=ReviewTasksResponse)
async def get_tomorrow_review_tasks(
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Get cards due tomorrow, grouped by topic."""
    groups = srs_service.review_tasks_tomorrow(session, user_id)
    return ReviewTasksResponse(tasks=grouped_card_responses(groups))


@router.get(
    "/subjects/{subject}/modules/{module}/chapters/{chapter}/sections/{section}/topics/{topic}/performance",
    response_model=TopicPerformanceResponse
)
async def get_topic_performance(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    topic: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Accuracy and recency of the legacy reviews of a topic's cards."""
    performance = srs_service.topic_performance(session, user_id, [subject, module, chapter, section, topic])
    return TopicPerformanceResponse(**performance)
