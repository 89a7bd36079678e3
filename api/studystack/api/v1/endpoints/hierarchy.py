"""
Hierarchy endpoints: list, rename and delete nodes at every taxonomy level,
and manage the cards of a topic.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List

from studystack.core.database import get_session
from studystack.schemas.card import (
    CardResponse,
    AddCardRequest,
    ReorderCardsRequest,
    ReorderCardsResponse,
)
from studystack.schemas.hierarchy import RenameRequest, RenameResponse, DeleteResponse
from studystack.services import hierarchy_service, card_service
from studystack.api.v1.endpoints.utils import get_current_user_id, card_responses

router = APIRouter(prefix="/subjects", tags=["hierarchy"])

SUBJECT_PATH = "/{subject}"
MODULE_PATH = SUBJECT_PATH + "/modules/{module}"
CHAPTER_PATH = MODULE_PATH + "/chapters/{chapter}"
SECTION_PATH = CHAPTER_PATH + "/sections/{section}"
TOPIC_PATH = SECTION_PATH + "/topics/{topic}"


def _rename(session: Session, user_id: str, prefix: List[str], request: RenameRequest) -> RenameResponse:
    modified_count = hierarchy_service.rename_node(session, user_id, prefix, request.new_name)
    return RenameResponse(modified_count=modified_count)


def _delete(session: Session, user_id: str, prefix: List[str]) -> DeleteResponse:
    deleted_count = hierarchy_service.delete_node(session, user_id, prefix)
    return DeleteResponse(deleted_count=deleted_count)


# --- Subjects ---

@router.get("", response_model=List[str])
async def get_subjects(
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Get all distinct subjects."""
    return hierarchy_service.list_children(session, user_id, [])


@router.patch(SUBJECT_PATH, response_model=RenameResponse)
async def rename_subject(
    subject: str,
    request: RenameRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return _rename(session, user_id, [subject], request)


@router.delete(SUBJECT_PATH, response_model=DeleteResponse)
async def delete_subject(
    subject: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Delete a subject and all its nested content."""
    return _delete(session, user_id, [subject])


# --- Modules ---

@router.get(SUBJECT_PATH + "/modules", response_model=List[str])
async def get_modules(
    subject: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return hierarchy_service.list_children(session, user_id, [subject])


@router.patch(MODULE_PATH, response_model=RenameResponse)
async def rename_module(
    subject: str,
    module: str,
    request: RenameRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return _rename(session, user_id, [subject, module], request)


@router.delete(MODULE_PATH, response_model=DeleteResponse)
async def delete_module(
    subject: str,
    module: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Delete a module and all its nested content."""
    return _delete(session, user_id, [subject, module])


# --- Chapters ---

@router.get(MODULE_PATH + "/chapters", response_model=List[str])
async def get_chapters(
    subject: str,
    module: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return hierarchy_service.list_children(session, user_id, [subject, module])


@router.patch(CHAPTER_PATH, response_model=RenameResponse)
async def rename_chapter(
    subject: str,
    module: str,
    chapter: str,
    request: RenameRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return _rename(session, user_id, [subject, module, chapter], request)


@router.delete(CHAPTER_PATH, response_model=DeleteResponse)
async def delete_chapter(
    subject: str,
    module: str,
    chapter: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Delete a chapter and all its nested content."""
    return _delete(session, user_id, [subject, module, chapter])


# --- Sections ---

@router.get(CHAPTER_PATH + "/sections", response_model=List[str])
async def get_sections(
    subject: str,
    module: str,
    chapter: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return hierarchy_service.list_children(session, user_id, [subject, module, chapter])


@router.patch(SECTION_PATH, response_model=RenameResponse)
async def rename_section(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    request: RenameRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return _rename(session, user_id, [subject, module, chapter, section], request)


@router.delete(SECTION_PATH, response_model=DeleteResponse)
async def delete_section(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Delete a section and all its nested content."""
    return _delete(session, user_id, [subject, module, chapter, section])


# --- Topics ---

@router.get(SECTION_PATH + "/topics", response_model=List[str])
async def get_topics(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return hierarchy_service.list_children(session, user_id, [subject, module, chapter, section])


@router.patch(TOPIC_PATH, response_model=RenameResponse)
async def rename_topic(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    topic: str,
    request: RenameRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    return _rename(session, user_id, [subject, module, chapter, section, topic], request)


@router.delete(TOPIC_PATH, response_model=DeleteResponse)
async def delete_topic(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    topic: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Delete a topic and all its cards."""
    return _delete(session, user_id, [subject, module, chapter, section, topic])


# --- Cards of a topic ---

@router.get(TOPIC_PATH + "/cards", response_model=List[CardResponse])
async def get_topic_cards(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    topic: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Get all cards of a topic, in their explicit order."""
    cards = hierarchy_service.list_topic_cards(session, user_id, [subject, module, chapter, section, topic])
    return card_responses(cards)


@router.post(TOPIC_PATH + "/cards", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def add_card_to_topic(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    topic: str,
    request: AddCardRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    """Add a card to a topic; its first review is due in one day."""
    card = card_service.add_card(session, user_id, [subject, module, chapter, section, topic], request.content)
    return CardResponse.from_card(card)


@router.patch(TOPIC_PATH + "/cards/reorder", response_model=ReorderCardsResponse)
async def reorder_topic_cards(
    subject: str,
    module: str,
    chapter: str,
    section: str,
    topic: str,
    request: ReorderCardsRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id)
):
    modified_count = card_service.reorder_topic_cards(
        session, user_id, [subject, module, chapter, section, topic], request.card_ids
    )
    return ReorderCardsResponse(modified_count=modified_count)
