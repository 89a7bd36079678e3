"""
Card service for creating and editing individual cards.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence
from sqlmodel import Session

from studystack.core.database import commit_or_raise, fetch_all
from studystack.core.exceptions import ValidationError
from studystack.models import Card
from studystack.services.hierarchy_service import get_owned_card, select_owned_cards
from studystack.services.srs_service import initialize_schedule
from studystack.utils.text_utils import (
    split_sentences,
    extract_keyword_indices,
    tokenize,
    valid_keyword_indices,
)
from studystack.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], field_name: str) -> None:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} is required")


def _path_kwargs(path: Sequence[Optional[str]]) -> dict:
    subject, module, chapter, section, topic = (list(path) + [None] * 5)[:5]
    return {
        'subject': subject,
        'module': module,
        'chapter': chapter,
        'section': section,
        'topic': topic,
    }


def add_card(
    session: Session,
    owner_id: str,
    path: Sequence[str],
    content: str,
    now: Optional[datetime] = None
) -> Card:
    """
    Add a card to a topic.

    The card starts on stage 1 with its first review due in one day and no
    keywords.

    Args:
        session: Database session
        owner_id: Caller identity
        path: Full subject/module/chapter/section/topic path
        content: Text of the fact
        now: Creation time (defaults to now)

    Raises:
        ValidationError: If content is empty
    """
    _require_text(content, "Content")
    if now is None:
        now = utcnow()

    card = Card(**_path_kwargs(path), content=content, keywords=[], created_by=owner_id, created_at=now)
    initialize_schedule(card, now)
    session.add(card)

    commit_or_raise(session, "add card", card)
    logger.info(f"Added card {card.id} to topic '{card.topic}' for {owner_id}")
    return card


def submit_raw(
    session: Session,
    owner_id: str,
    path: Sequence[Optional[str]],
    raw_text: str
) -> Card:
    """
    Store raw text verbatim as one placeholder card.

    Used to create hierarchy nodes while navigating. Unlike added or ingested
    cards, the placeholder stays unscheduled (stage 0, no next review).
    """
    subject = path[0] if path else None
    _require_text(subject, "subject")
    _require_text(raw_text, "rawText")

    card = Card(**_path_kwargs(path), content=raw_text, keywords=[], created_by=owner_id)
    session.add(card)

    commit_or_raise(session, "submit raw data", card)
    return card


def ingest_raw_text(
    session: Session,
    owner_id: str,
    path: Sequence[Optional[str]],
    raw_text: str,
    now: Optional[datetime] = None
) -> List[Card]:
    """
    Split raw text into sentences and create one scheduled card per sentence.

    Returns:
        Created cards in reading order

    Raises:
        ValidationError: If subject or raw text is missing
    """
    subject = path[0] if path else None
    _require_text(subject, "subject")
    _require_text(raw_text, "rawText")
    if now is None:
        now = utcnow()

    created = []
    for sentence in split_sentences(raw_text):
        card = Card(
            **_path_kwargs(path),
            content=sentence,
            keywords=extract_keyword_indices(sentence),
            created_by=owner_id,
            created_at=now,
        )
        initialize_schedule(card, now)
        session.add(card)
        created.append(card)

    commit_or_raise(session, "process raw data", *created)

    logger.info(f"Ingested {len(created)} card(s) into subject '{subject}' for {owner_id}")
    return created


def update_content(session: Session, owner_id: str, card_id: int, content: str) -> Card:
    """
    Replace a card's content.

    Keyword indices that no longer address a token of the new content are
    dropped.
    """
    _require_text(content, "Content")
    card = get_owned_card(session, owner_id, card_id)

    card.content = content
    keywords = valid_keyword_indices(card.keywords or [], content)
    if len(keywords) != len(card.keywords or []):
        logger.warning(
            f"Card {card_id}: dropped stale keyword indices "
            f"{sorted(set(card.keywords) - set(keywords))} after content edit"
        )
        card.keywords = keywords
    session.add(card)

    commit_or_raise(session, "update card content", card)
    return card


def update_keywords(session: Session, owner_id: str, card_id: int, keywords: List[int]) -> Card:
    """
    Replace a card's keyword indices.

    Raises:
        ValidationError: Unless keywords is a non-empty list of token indices
            of the card's content
    """
    if not keywords or any(isinstance(index, bool) or not isinstance(index, int) or index < 0 for index in keywords):
        raise ValidationError("Keywords must be a non-empty array of non-negative integers (indices)")

    card = get_owned_card(session, owner_id, card_id)
    token_count = len(tokenize(card.content))
    out_of_range = [index for index in keywords if index >= token_count]
    if out_of_range:
        raise ValidationError(
            f"Keyword indices {out_of_range} out of range for content with {token_count} token(s)"
        )

    card.keywords = sorted(set(keywords))
    session.add(card)

    commit_or_raise(session, "update keywords", card)
    return card


def update_order(session: Session, owner_id: str, card_id: int, order: int) -> Card:
    card = get_owned_card(session, owner_id, card_id)
    card.order = order
    session.add(card)

    commit_or_raise(session, "update card order", card)
    return card


def reorder_topic_cards(
    session: Session,
    owner_id: str,
    path: Sequence[str],
    card_ids: List[int]
) -> int:
    """
    Set each listed card's order to its position in `card_ids`.

    Ids that are not cards of the topic are skipped.

    Returns:
        Number of cards reordered
    """
    if not card_ids:
        raise ValidationError("cardIds (non-empty array) required")

    cards = fetch_all(
        session,
        select_owned_cards(owner_id, path).where(Card.id.in_(card_ids)),  # type: ignore
        "reorder cards"
    )
    positions = {card_id: position for position, card_id in enumerate(card_ids)}
    for card in cards:
        card.order = positions[card.id]
        session.add(card)

    commit_or_raise(session, "reorder cards")
    return len(cards)


def delete_card(session: Session, owner_id: str, card_id: int) -> None:
    card = get_owned_card(session, owner_id, card_id)
    session.delete(card)
    commit_or_raise(session, "delete card")
    logger.info(f"Deleted card {card_id} for {owner_id}")
