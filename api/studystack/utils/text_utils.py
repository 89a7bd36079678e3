"""
Text utility functions for turning raw study text into cards.
"""
import re
from typing import List

# Paragraphs are separated by a blank line (which may contain whitespace)
PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")

# Sentences end with terminal punctuation followed by whitespace
SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")

MIN_KEYWORD_LENGTH = 5
MAX_KEYWORDS = 2


def tokenize(content: str) -> List[str]:
    """Whitespace tokens of a card's content; keyword indices address this list."""
    return content.split()


def split_paragraphs(raw_text: str) -> List[str]:
    return [p for p in PARAGRAPH_SPLIT_RE.split(raw_text) if p]


def split_sentences(raw_text: str) -> List[str]:
    """
    Split raw text into trimmed sentences, paragraph by paragraph.
    
    Empty fragments are discarded.
    
    Args:
        raw_text: The text to split
        
    Returns:
        Sentences in reading order
    """
    sentences = []
    for paragraph in split_paragraphs(raw_text):
        for fragment in SENTENCE_SPLIT_RE.split(paragraph):
            sentence = fragment.strip()
            if sentence:
                sentences.append(sentence)
    return sentences


def extract_keyword_indices(content: str) -> List[int]:
    """
    Pick up to two of the longest tokens longer than four characters.
    
    Ties keep their original order (stable sort, descending by length).
    
    Returns:
        Sorted token indices of the chosen keywords
    """
    candidates = [
        (index, token) for index, token in enumerate(tokenize(content))
        if len(token) >= MIN_KEYWORD_LENGTH
    ]
    candidates.sort(key=lambda item: len(item[1]), reverse=True)
    return sorted(index for index, _ in candidates[:MAX_KEYWORDS])


def valid_keyword_indices(keywords: List[int], content: str) -> List[int]:
    """Keyword indices that still address a token of `content`."""
    token_count = len(tokenize(content))
    return [index for index in keywords if 0 <= index < token_count]
