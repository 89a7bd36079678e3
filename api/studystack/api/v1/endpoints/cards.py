"""
Card endpoints: raw text submission and per-card edits.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from studystack.core.database import get_session
from studystack.schemas.card import (
    CardResponse,
    SubmitRawRequest,
    IngestResponse,
    UpdateContentRequest,
    UpdateKeywordsRequest,
    UpdateOrderRequest,
    SuccessResponse,
)
from studystack.services import card_service
from studystack.api.v1.endpoints.utils import get_current_user_id, card_responses

router = APIRouter(tags=["cards"])


def _request_path(request: SubmitRawRequest) -> list:
    return [request.subject, request.module, request.chapter, request.section, request.topic]


@router.post("/submit-raw", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def submit_raw(
    request: SubmitRawRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """
    Create a hierarchy node by storing the raw text as a single unscheduled card.
    
    Use /ingest to split text into one scheduled card per sentence.
    """
    card = card_service.submit_raw(session, user_id, _request_path(request), request.raw_text)
    return CardResponse.from_card(card)


@router.post("/ingest", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
async def ingest_raw_text(
    request: SubmitRawRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Split raw text into sentences, creating one card per sentence."""
    cards = card_service.ingest_raw_text(session, user_id, _request_path(request), request.raw_text)
    return IngestResponse(created=card_responses(cards))


@router.patch("/cards/{card_id}/content", response_model=CardResponse)
async def update_card_content(
    card_id: int,
    request: UpdateContentRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    card = card_service.update_content(session, user_id, card_id, request.content)
    return CardResponse.from_card(card)


@router.patch("/cards/{card_id}/keywords", response_model=CardResponse)
async def update_card_keywords(
    card_id: int,
    request: UpdateKeywordsRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Replace the highlighted keyword indices of a card."""
    card = card_service.update_keywords(session, user_id, card_id, request.keywords)
    return CardResponse.from_card(card)


@router.patch("/cards/{card_id}/order", response_model=CardResponse)
async def update_card_order(
    card_id: int,
    request: UpdateOrderRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    card = card_service.update_order(session, user_id, card_id, request.order)
    return CardResponse.from_card(card)


@router.delete("/cards/{card_id}", response_model=SuccessResponse)
async def delete_card(
    card_id: int,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    card_service.delete_card(session, user_id, card_id)
    return SuccessResponse()
