from __future__ import annotations
from typing import List, NamedTuple, Optional
import re
from collections import Counter

_WHITESPACE = re.compile(r"\s+")
_SENT_SPLIT = re.compile(r"[.!?]+")
_NON_WORD = re.compile(r"[^\w\s]")

DEFAULT_MAX_SENTENCES = 2
MIN_SENTENCES = 1
MAX_SENTENCES = 2

# inputs longer than this get an early-position bonus
POSITION_BONUS_THRESHOLD = 5
POSITION_BONUS_WEIGHT = 0.5

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "can", "this", "that", "these", "those",
})

class ScoredSentence(NamedTuple):
    text: str
    score: float
    index: int

def clamp_sentences(requested: Optional[int] = None) -> int:
    if requested is None:
        requested = DEFAULT_MAX_SENTENCES
    return min(MAX_SENTENCES, max(MIN_SENTENCES, int(requested)))

def split_sentences(text: str) -> List[str]:
    normalized = _WHITESPACE.sub(" ", text or "")
    return [s.strip() for s in _SENT_SPLIT.split(normalized) if s.strip()]

def tokenize(text: str) -> List[str]:
    words = _NON_WORD.sub(" ", text.lower()).split()
    return [w for w in words if len(w) > 2 and w not in STOP_WORDS]

def word_frequencies(text: str) -> Counter:
    return Counter(tokenize(text))

def position_bonus(index: int, total: int) -> float:
    if total <= POSITION_BONUS_THRESHOLD:
        return 0.0
    return POSITION_BONUS_WEIGHT / (index + 1)

def score_sentences(sentences: List[str], freq: Counter) -> List[ScoredSentence]:
    total = len(sentences)
    scored = []
    for i, s in enumerate(sentences):
        val = sum(freq.get(w, 0) for w in tokenize(s))
        scored.append(ScoredSentence(s, val + position_bonus(i, total), i))
    return scored

def select_sentences(scored: List[ScoredSentence], limit: int) -> List[str]:
    # ties keep reading order
    ranked = sorted(scored, key=lambda x: (-x.score, x.index))[:limit]
    return [s.text for s in sorted(ranked, key=lambda x: x.index)]

def _join(sentences: List[str]) -> str:
    return ". ".join(sentences) + "."

def summarize(text: str, max_sentences: int = DEFAULT_MAX_SENTENCES) -> str:
    """
    Extractive summary of one or two sentences:
    - Split into sentences on runs of . ! ?
    - Score by corpus word frequency (stop words dropped), plus a small
      bonus for early sentences when the text is long
    - Return the top sentences in document order, joined with ". "

    Returns "" when the text holds no sentence with any content.
    """
    limit = clamp_sentences(max_sentences)
    if not text or not text.strip():
        return ""

    sents = split_sentences(text)
    if not sents:
        return ""
    if len(sents) <= limit:
        return _join(sents[:limit])

    freq = word_frequencies(text)
    return _join(select_sentences(score_sentences(sents, freq), limit))
