"""
Post classification.

Decides whether a forum post is a game thread at all, and whether two
titles from the same forum are reposts of one another. Live-score bots
repost the same thread with an updated score or record in the title, so
title normalization strips exactly those volatile parts.
"""

import logging
import re

from models.game import RawPost, ThreadType

__all__ = [
    "GAME_THREAD_MARKERS",
    "is_game_thread_post",
    "normalize_title",
    "is_similar_title",
    "thread_type",
]

logger = logging.getLogger(__name__)

# ══════════════════════════════════════════════════════════════════════════════
# Genre Detection
# ══════════════════════════════════════════════════════════════════════════════

GAME_THREAD_MARKERS: tuple[str, ...] = (
    "game thread",
    "gamethread",
    "game day thread",
    "gdt",
    "match thread",
    "post game thread",
    "postgame thread",
)


def is_game_thread_post(post: RawPost) -> bool:
    """
    Check whether a post is a game thread.

    Substring match against the lower-cased title and moderator flair,
    so "🏈 GAME THREAD: Patriots @ Jets" qualifies.
    """
    title = post.title.lower()
    flair = (post.link_flair_text or "").lower()
    return any(marker in title or marker in flair for marker in GAME_THREAD_MARKERS)


def thread_type(title: str) -> ThreadType:
    return ThreadType.from_title(title)


# ══════════════════════════════════════════════════════════════════════════════
# Duplicate Detection
# ══════════════════════════════════════════════════════════════════════════════

SIMILARITY_THRESHOLD = 0.7
MIN_WORD_LENGTH = 3

_RECORD_RE = re.compile(r"\(\d+-\d+\)")
_SCORE_RE = re.compile(r"\d+-\d+")
_PUNCT_RE = re.compile(r"[^\w\s]")
_SPACE_RE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Lowercase, drop records/scores and punctuation, collapse whitespace."""
    t = title.lower()
    t = _RECORD_RE.sub("", t)
    t = _SCORE_RE.sub("", t)
    t = _PUNCT_RE.sub("", t)
    return _SPACE_RE.sub(" ", t).strip()


def _words(normalized: str) -> set[str]:
    return {w for w in normalized.split(" ") if len(w) >= MIN_WORD_LENGTH}


def is_similar_title(title_a: str, title_b: str) -> bool:
    """
    Check whether two titles describe the same thread.

    Similar when the normalized titles are equal, one contains the other,
    or more than 70% of the shorter title's words (3+ chars) appear in
    the other.
    """
    a = normalize_title(title_a)
    b = normalize_title(title_b)

    if a == b:
        return True

    # An empty title is contained in everything
    if not a or not b:
        return False

    if a in b or b in a:
        return True

    words_a = _words(a)
    words_b = _words(b)
    if not words_a or not words_b:
        return False

    overlap = len(words_a & words_b) / min(len(words_a), len(words_b))
    return overlap > SIMILARITY_THRESHOLD
