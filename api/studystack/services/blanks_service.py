"""
Forgotten blanks service.

Each user keeps, per card, the set of token indices currently marked
forgotten plus a lifetime count of how often each index became forgotten.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from studystack.core.database import commit_or_raise, fetch_first
from studystack.core.exceptions import ValidationError
from studystack.models import ForgottenBlanks
from studystack.services.hierarchy_service import get_owned_card

logger = logging.getLogger(__name__)


def apply_forgotten_update(
    old_blanks: Iterable[int],
    stats: Dict[str, int],
    new_blanks: Iterable[int]
) -> Tuple[List[int], Dict[str, int]]:
    """
    Compute the stored state after the user submits a new forgotten set.

    Indices newly present in the set get their counter incremented by one.
    Indices leaving the set keep their counters.

    Args:
        old_blanks: Currently stored forgotten set
        stats: Currently stored counters (blank index as string -> count)
        new_blanks: Full forgotten set submitted by the user

    Returns:
        (new blanks sorted and de-duplicated, new counters)
    """
    old_set = set(old_blanks)
    new_set = set(new_blanks)
    updated_stats = dict(stats)
    for index in sorted(new_set - old_set):
        key = str(index)
        updated_stats[key] = updated_stats.get(key, 0) + 1
    return sorted(new_set), updated_stats


def _entry_query(card_id: int, user_id: str):
    return select(ForgottenBlanks).where(
        ForgottenBlanks.card_id == card_id,
        ForgottenBlanks.user_id == user_id
    )


def _find_entry(session: Session, card_id: int, user_id: str) -> Optional[ForgottenBlanks]:
    return session.exec(_entry_query(card_id, user_id)).first()


def get_forgotten_blanks(session: Session, owner_id: str, card_id: int, user_id: str) -> List[int]:
    """
    Current forgotten set of a user for a card.

    A storage failure while reading degrades to an empty set.

    Raises:
        NotFoundError: If the card does not exist
    """
    card = get_owned_card(session, owner_id, card_id)
    try:
        entry = _find_entry(session, card.id, user_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning(f"Could not read forgotten blanks of card {card_id} for {user_id}: {str(e)}")
        return []
    return list(entry.blanks) if entry else []


def get_blank_stats(session: Session, owner_id: str, card_id: int, user_id: str) -> Tuple[List[int], Dict[int, int]]:
    """Current forgotten set and lifetime counters of a user for a card."""
    card = get_owned_card(session, owner_id, card_id)
    entry = fetch_first(session, _entry_query(card.id, user_id), "load blank stats")
    if not entry:
        return [], {}
    return list(entry.blanks), {int(index): count for index, count in (entry.stats or {}).items()}


def update_forgotten_blanks(
    session: Session,
    owner_id: str,
    card_id: int,
    user_id: str,
    forgotten_blanks: List[int]
) -> ForgottenBlanks:
    """
    Replace a user's forgotten set for a card and count newly forgotten blanks.

    The entry is created on first use.

    Raises:
        ValidationError: If an index is negative
        NotFoundError: If the card does not exist
    """
    if any(index < 0 for index in forgotten_blanks):
        raise ValidationError("forgottenBlanks must contain non-negative integers")

    card = get_owned_card(session, owner_id, card_id)
    entry = fetch_first(session, _entry_query(card.id, user_id), "update forgotten blanks")
    if not entry:
        entry = ForgottenBlanks(card_id=card.id, user_id=user_id, blanks=[], stats={})

    # Assign fresh objects so the JSON columns are flagged as modified
    entry.blanks, entry.stats = apply_forgotten_update(entry.blanks or [], entry.stats or {}, forgotten_blanks)
    session.add(entry)

    commit_or_raise(session, "update forgotten blanks", entry)
    return entry
