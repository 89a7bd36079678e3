"""
SRS (Spaced Repetition System) service.

Two schedulers live side by side on each card:
- the staged scheduler (`schedule_stage` / `schedule_next_review`), advanced
  per topic and read by the review-task queries;
- the legacy scalar scheduler (`next_review`), advanced per card from a
  remembered/forgotten signal and read by the review-cards query.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from sqlmodel import Session, select

from studystack.core.config import settings
from studystack.core.database import commit_or_raise, fetch_all
from studystack.core.exceptions import NotFoundError
from studystack.models import Card, ReviewHistoryEntry, ScheduleLogEntry
from studystack.services.hierarchy_service import get_owned_card, list_topic_cards
from studystack.utils.time_utils import utcnow, local_day_window

logger = logging.getLogger(__name__)


# Staged review intervals in days; stage s waits REVIEW_INTERVALS[s - 1]
REVIEW_INTERVALS = [1, 3, 7, 14, 30, 60]
MAX_STAGE = len(REVIEW_INTERVALS)
MIN_SCHEDULED_STAGE = 1

# Legacy scalar scheduler
LEGACY_REMEMBERED_DAYS = 3
LEGACY_FORGOTTEN_DAYS = 1

# Graduated legacy scheduler, indexed by number of prior reviews
GRADUATED_INTERVALS = [1, 2, 4, 7, 14, 16, 30, 60]
GRADUATED_MAX_DAYS = 90


def next_stage(current_stage: int, success: bool) -> int:
    """
    Stage after a review.

    Success moves up one stage (capped at the last stage). Failure moves down
    one stage but never below 1, so a scheduled card never becomes new again.
    """
    current_stage = current_stage or 0
    if success:
        return min(current_stage + 1, MAX_STAGE)
    return max(current_stage - 1, MIN_SCHEDULED_STAGE)


def interval_days(stage: int) -> int:
    """Days to wait at a stage, clamped to the table."""
    index = max(MIN_SCHEDULED_STAGE, min(stage, MAX_STAGE)) - 1
    return REVIEW_INTERVALS[index]


def initialize_schedule(card: Card, now: Optional[datetime] = None) -> None:
    """Put a freshly created card on stage 1, due one day later."""
    if now is None:
        now = utcnow()
    card.schedule_stage = MIN_SCHEDULED_STAGE
    card.schedule_next_review = now + timedelta(days=interval_days(MIN_SCHEDULED_STAGE))


def apply_review_transition(
    card: Card,
    success: bool,
    performance: Optional[float] = None,
    now: Optional[datetime] = None
) -> ScheduleLogEntry:
    """
    Advance a card's staged schedule and log the transition.

    Args:
        card: Card to update (not committed)
        success: Review outcome
        performance: Opaque caller-supplied score
        now: Review time (defaults to now)

    Returns:
        The appended log entry
    """
    if now is None:
        now = utcnow()

    stage = next_stage(card.schedule_stage, success)
    card.schedule_stage = stage
    card.schedule_next_review = now + timedelta(days=interval_days(stage))

    entry = ScheduleLogEntry(date=now, stage=stage, success=success, performance=performance)
    card.schedule_log.append(entry)
    return entry


def submit_topic_review(
    session: Session,
    owner_id: str,
    topic: str,
    success: bool,
    performance: Optional[float] = None,
    now: Optional[datetime] = None,
    subject: Optional[str] = None,
    module: Optional[str] = None,
    chapter: Optional[str] = None,
    section: Optional[str] = None
) -> int:
    """
    Apply one review outcome to every card of a topic.

    Cards are matched by topic name; the optional outer segments narrow the
    match to one branch of the hierarchy. All cards are committed together.

    Returns:
        Number of cards updated

    Raises:
        NotFoundError: If the topic has no cards
    """
    if now is None:
        now = utcnow()

    query = select(Card).where(Card.created_by == owner_id, Card.topic == topic)
    for column, value in (
        (Card.subject, subject),
        (Card.module, module),
        (Card.chapter, chapter),
        (Card.section, section),
    ):
        if value is not None:
            query = query.where(column == value)
    cards = fetch_all(session, query, "load topic cards")

    if not cards:
        raise NotFoundError(f"No cards found for topic '{topic}'")

    for card in cards:
        apply_review_transition(card, success, performance, now)
        session.add(card)
    stages = sorted({card.schedule_stage for card in cards})

    commit_or_raise(session, "submit review")

    logger.info(
        f"Topic review '{topic}' for {owner_id}: success={success}, performance={performance}, "
        f"{len(cards)} card(s) now at stage(s) {stages}"
    )
    return len(cards)


def submit_card_review(
    session: Session,
    owner_id: str,
    card_id: int,
    remembered: bool,
    now: Optional[datetime] = None
) -> Card:
    """
    Record a legacy review: +3 days if remembered, +1 day if not.

    Only the legacy `next_review` moves; the staged schedule is untouched.
    """
    if now is None:
        now = utcnow()

    card = get_owned_card(session, owner_id, card_id)
    card.review_history.append(ReviewHistoryEntry(date=now, remembered=remembered))
    days = LEGACY_REMEMBERED_DAYS if remembered else LEGACY_FORGOTTEN_DAYS
    card.next_review = now + timedelta(days=days)
    session.add(card)

    commit_or_raise(session, "update review", card)
    return card


def graduated_interval_days(prior_reviews: int, remembered: bool) -> int:
    """Legacy graduated interval: grows with the number of earlier reviews."""
    if not remembered:
        return LEGACY_FORGOTTEN_DAYS
    if prior_reviews < len(GRADUATED_INTERVALS):
        return GRADUATED_INTERVALS[prior_reviews]
    return GRADUATED_MAX_DAYS


def submit_graduated_card_review(
    session: Session,
    owner_id: str,
    card_id: int,
    remembered: bool,
    now: Optional[datetime] = None
) -> Card:
    """Record a legacy review using the graduated interval table."""
    if now is None:
        now = utcnow()

    card = get_owned_card(session, owner_id, card_id)
    days = graduated_interval_days(len(card.review_history), remembered)
    card.review_history.append(ReviewHistoryEntry(date=now, remembered=remembered))
    card.next_review = now + timedelta(days=days)
    session.add(card)

    commit_or_raise(session, "update review", card)
    return card


def due_review_cards(session: Session, owner_id: str, now: Optional[datetime] = None) -> List[Card]:
    """Cards whose legacy next review has arrived."""
    if now is None:
        now = utcnow()
    return fetch_all(
        session,
        select(Card)
        .where(Card.created_by == owner_id, Card.next_review <= now)  # type: ignore
        .order_by(Card.next_review, Card.id),  # type: ignore
        "load review cards"
    )


def group_by_topic(cards: List[Card]) -> Dict[str, List[Card]]:
    """Group cards by topic name; cards without a topic go under ''."""
    groups: Dict[str, List[Card]] = {}
    for card in cards:
        groups.setdefault(card.topic or "", []).append(card)
    return groups


def review_tasks_today(
    session: Session,
    owner_id: str,
    now: Optional[datetime] = None
) -> Dict[str, List[Card]]:
    """Cards whose staged review is due, grouped by topic."""
    if now is None:
        now = utcnow()
    cards = fetch_all(
        session,
        select(Card)
        .where(Card.created_by == owner_id, Card.schedule_next_review <= now)  # type: ignore
        .order_by(Card.schedule_next_review, Card.id),  # type: ignore
        "load review tasks"
    )
    return group_by_topic(cards)


def review_tasks_tomorrow(
    session: Session,
    owner_id: str,
    now: Optional[datetime] = None,
    tz_name: Optional[str] = None
) -> Dict[str, List[Card]]:
    """
    Cards whose staged review falls on tomorrow's calendar day, grouped by topic.

    Args:
        session: Database session
        owner_id: Caller identity
        now: Reference time (naive UTC, defaults to now)
        tz_name: Calendar timezone (defaults to settings.review_timezone)
    """
    if now is None:
        now = utcnow()
    start, end = local_day_window(now, tz_name or settings.review_timezone, offset_days=1)
    cards = fetch_all(
        session,
        select(Card)
        .where(
            Card.created_by == owner_id,
            Card.schedule_next_review >= start,  # type: ignore
            Card.schedule_next_review < end  # type: ignore
        )
        .order_by(Card.schedule_next_review, Card.id),  # type: ignore
        "load review tasks"
    )
    return group_by_topic(cards)


def topic_performance(session: Session, owner_id: str, path: List[str]) -> Dict[str, object]:
    """
    Aggregate the legacy review history of every card in a topic.

    Returns:
        Dict with total_reviews, correct, accuracy (None without reviews)
        and last_reviewed (None without reviews)
    """
    total = 0
    correct = 0
    last_reviewed: Optional[datetime] = None

    for card in list_topic_cards(session, owner_id, path):
        for entry in card.review_history:
            total += 1
            if entry.remembered:
                correct += 1
            if last_reviewed is None or entry.date > last_reviewed:
                last_reviewed = entry.date

    return {
        'total_reviews': total,
        'correct': correct,
        'accuracy': correct / total if total > 0 else None,
        'last_reviewed': last_reviewed,
    }
