"""
Models package - imports all models so they register with SQLModel.
"""
from studystack.models.enums import HierarchyLevel, HIERARCHY_LEVELS
from studystack.models.card import Card
from studystack.models.review_history import ReviewHistoryEntry
from studystack.models.schedule_log import ScheduleLogEntry
from studystack.models.forgotten_blanks import ForgottenBlanks

__all__ = [
    'HierarchyLevel',
    'HIERARCHY_LEVELS',
    'Card',
    'ReviewHistoryEntry',
    'ScheduleLogEntry',
    'ForgottenBlanks',
]
