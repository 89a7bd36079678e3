"""
Utility functions for endpoint operations.
"""
from typing import Dict, List

from studystack.core.config import settings
from studystack.models import Card
from studystack.schemas.card import CardResponse


def get_current_user_id() -> str:
    """
    Dependency returning the caller identity.

    There is no authentication: every request is attributed to the configured
    default user, which partitions all card data.
    """
    return settings.default_user_id


def card_responses(cards: List[Card]) -> List[CardResponse]:
    return [CardResponse.from_card(card) for card in cards]


def grouped_card_responses(groups: Dict[str, List[Card]]) -> Dict[str, List[CardResponse]]:
    return {topic: card_responses(cards) for topic, cards in groups.items()}
