"""
Hierarchy service for the flat card store.

There are no module/chapter/section/topic rows: a node is the set of cards
sharing its path prefix, so renaming relabels every card under the prefix and
deleting removes them.
"""
import logging
from sqlmodel import Session, select
from typing import List, Sequence

from studystack.core.database import commit_or_raise, fetch_all, fetch_first
from studystack.core.exceptions import ValidationError, NotFoundError
from studystack.models import Card, HierarchyLevel, HIERARCHY_LEVELS

logger = logging.getLogger(__name__)


def path_conditions(prefix: Sequence[str]) -> list:
    """WHERE clauses matching cards whose leading path segments equal `prefix`."""
    if len(prefix) > len(HIERARCHY_LEVELS):
        raise ValidationError(f"Path has {len(prefix)} segments, at most {len(HIERARCHY_LEVELS)} allowed")
    return [
        getattr(Card, level.value) == value
        for level, value in zip(HIERARCHY_LEVELS, prefix)
    ]


def select_owned_cards(owner_id: str, prefix: Sequence[str] = ()):
    """Select the owner's cards under a path prefix."""
    return select(Card).where(Card.created_by == owner_id, *path_conditions(prefix))


def get_owned_card(session: Session, owner_id: str, card_id: int) -> Card:
    """
    Fetch a card by id, scoped to its owner.

    Raises:
        NotFoundError: If the card does not exist or belongs to someone else
    """
    card = fetch_first(
        session,
        select(Card).where(Card.id == card_id, Card.created_by == owner_id),
        "load card"
    )
    if not card:
        raise NotFoundError(f"Card {card_id} not found")
    return card


def list_children(session: Session, owner_id: str, prefix: Sequence[str] = ()) -> List[str]:
    """
    Distinct names at the level below `prefix`.

    An empty prefix lists subjects. Empty or missing names are excluded below
    the subject level.

    Args:
        session: Database session
        owner_id: Caller identity
        prefix: Path segments of the parent node (0-4 segments)

    Returns:
        Sorted child names
    """
    if len(prefix) >= len(HIERARCHY_LEVELS):
        raise ValidationError("Topics have no child levels")

    level = HierarchyLevel.for_depth(len(prefix) + 1)
    column = getattr(Card, level.value)
    values = fetch_all(
        session,
        select(column).where(Card.created_by == owner_id, *path_conditions(prefix)).distinct(),
        f"list {level.value}s"
    )

    if level is not HierarchyLevel.SUBJECT:
        values = [value for value in values if value]
    return sorted(values)


def list_topic_cards(session: Session, owner_id: str, path: Sequence[str]) -> List[Card]:
    """All cards of a topic in the user's explicit order."""
    if len(path) != len(HIERARCHY_LEVELS):
        raise ValidationError("A full subject/module/chapter/section/topic path is required")
    return fetch_all(
        session,
        select_owned_cards(owner_id, path).order_by(Card.order, Card.id),  # type: ignore
        "list topic cards"
    )


def rename_node(session: Session, owner_id: str, prefix: Sequence[str], new_name: str) -> int:
    """
    Rename the node addressed by `prefix` (its last segment is the old name).

    Every card under the node gets the new name at that level; deeper
    segments are left alone. Renaming to the same name is a no-op.

    Args:
        session: Database session
        owner_id: Caller identity
        prefix: Path through the level being renamed
        new_name: Replacement name

    Returns:
        Number of cards relabelled

    Raises:
        ValidationError: If the new name is empty or the prefix is empty
    """
    if not prefix:
        raise ValidationError("A path to the node being renamed is required")
    if new_name is None or not new_name.strip():
        raise ValidationError("newName is required")

    level = HierarchyLevel.for_depth(len(prefix))
    old_name = prefix[-1]
    new_name = new_name.strip()

    if old_name == new_name:
        logger.info(f"Rename {level.value} '{old_name}' skipped: name unchanged")
        return 0

    cards = fetch_all(session, select_owned_cards(owner_id, prefix), f"rename {level.value}")
    for card in cards:
        setattr(card, level.value, new_name)
        session.add(card)

    commit_or_raise(session, f"rename {level.value}")

    logger.info(f"Renamed {level.value} '{old_name}' -> '{new_name}' on {len(cards)} card(s) for {owner_id}")
    return len(cards)


def delete_node(session: Session, owner_id: str, prefix: Sequence[str]) -> int:
    """
    Delete every card under the node addressed by `prefix`.

    This is the only cascade: removing a module removes all of its chapters,
    sections, topics and cards. Review logs and forgotten-blank entries go
    with their cards.

    Returns:
        Number of cards deleted
    """
    if not prefix:
        raise ValidationError("A path to the node being deleted is required")

    level = HierarchyLevel.for_depth(len(prefix))
    cards = fetch_all(session, select_owned_cards(owner_id, prefix), f"delete {level.value}")
    for card in cards:
        session.delete(card)

    commit_or_raise(session, f"delete {level.value}")

    logger.info(f"Deleted {level.value} '{prefix[-1]}' with {len(cards)} card(s) for {owner_id}")
    return len(cards)
