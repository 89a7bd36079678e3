"""
Forgotten blanks endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from studystack.core.database import get_session
from studystack.schemas.blanks import (
    ForgottenBlanksResponse,
    UpdateForgottenBlanksRequest,
    BlankStatsResponse,
)
from studystack.schemas.card import SuccessResponse
from studystack.services import blanks_service
from studystack.api.v1.endpoints.utils import get_current_user_id

router = APIRouter(prefix="/cards", tags=["blanks"])


@router.get("/{card_id}/blanks", response_model=ForgottenBlanksResponse)
async def get_forgotten_blanks(
    card_id: int,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Get the blanks the caller currently has marked forgotten on a card."""
    blanks = blanks_service.get_forgotten_blanks(session, user_id, card_id, user_id)
    return ForgottenBlanksResponse(forgotten_blanks=blanks)


@router.patch("/{card_id}/blanks", response_model=SuccessResponse)
async def update_forgotten_blanks(
    card_id: int,
    request: UpdateForgottenBlanksRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Replace the caller's forgotten set; newly forgotten blanks are counted."""
    blanks_service.update_forgotten_blanks(session, user_id, card_id, user_id, request.forgotten_blanks)
    return SuccessResponse()


@router.get("/{card_id}/blanks/stats", response_model=BlankStatsResponse)
async def get_blank_stats(
    card_id: int,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    blanks, stats = blanks_service.get_blank_stats(session, user_id, card_id, user_id)
    return BlankStatsResponse(forgotten_blanks=blanks, stats=stats)
