"""
Model enums.
"""
from enum import Enum


class HierarchyLevel(str, Enum):
    """Levels of the study taxonomy, outermost first."""
    SUBJECT = "subject"
    MODULE = "module"
    CHAPTER = "chapter"
    SECTION = "section"
    TOPIC = "topic"

    @classmethod
    def for_depth(cls, depth: int) -> "HierarchyLevel":
        return HIERARCHY_LEVELS[depth - 1]


HIERARCHY_LEVELS = list(HierarchyLevel)
