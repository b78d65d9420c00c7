# ABOUTME: Deterministic re-ranking of Hardcover search candidates against a target title and author.
# ABOUTME: Author match dominates, title closeness grades, collections are penalized, popularity breaks ties.

import logging
import math
import re
from collections.abc import Sequence

from hardshelf.catalog.candidate import ScoredCandidate
from hardshelf.catalog.types import SearchCandidate

logger = logging.getLogger(__name__)

# Any author match must outrank every title-only match, so this weight
# exceeds the largest possible title + popularity total.
AUTHOR_MATCH_WEIGHT = 1000.0

# Title closeness tiers; only the highest applicable tier counts.
TITLE_EXACT_WEIGHT = 100.0
TITLE_PREFIX_WEIGHT = 75.0
TITLE_CONTAINS_WEIGHT = 50.0

COLLECTION_PENALTY = 50.0

# Log-scaled so popularity stays below the 25-point gap between title tiers
# for counts under ~10^5.
POPULARITY_WEIGHT = 5.0

COLLECTION_KEYWORDS = (
    "collection",
    "box set",
    "bundle",
    "series",
    "complete set",
    " 4 books",
    " 3 books",
)

_PUNCTUATION_RE = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")
_WHITESPACE_RE = re.compile(r"\s{2,}")


def normalize_for_comparison(text: str) -> str:
    """Lowercase, strip punctuation, and collapse runs of whitespace."""
    text = _PUNCTUATION_RE.sub("", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def _is_collection(normalized_title: str) -> bool:
    return any(keyword in normalized_title for keyword in COLLECTION_KEYWORDS)


def _author_matches(contributors: Sequence[str], normalized_author: str) -> bool:
    if not normalized_author:
        return True
    for name in contributors:
        normalized = normalize_for_comparison(name)
        if normalized and (normalized in normalized_author or normalized_author in normalized):
            return True
    return False


def _title_closeness(candidate_title: str, target_title: str) -> float:
    if candidate_title == target_title:
        return TITLE_EXACT_WEIGHT
    if candidate_title.startswith(target_title):
        return TITLE_PREFIX_WEIGHT
    if target_title in candidate_title or candidate_title in target_title:
        return TITLE_CONTAINS_WEIGHT
    return 0.0


def score_candidate(candidate: SearchCandidate, title: str, author: str) -> float:
    """Score how well a search candidate matches the target title and author.

    Sums four components:
    1. +1000 when the author matches (or no author was given).
    2. +100 exact / +75 starts-with / +50 either-contains title match.
    3. -50 when the candidate looks like a collection and the target does not.
    4. +5 * log10(popularity + 1) when popularity is known.

    The result depends only on the arguments.
    """
    target_title = normalize_for_comparison(title)
    target_author = normalize_for_comparison(author)
    candidate_title = normalize_for_comparison(candidate.title)

    score = 0.0

    if _author_matches(candidate.contributor_names, target_author):
        score += AUTHOR_MATCH_WEIGHT

    score += _title_closeness(candidate_title, target_title)

    if _is_collection(candidate_title) and not _is_collection(target_title):
        score -= COLLECTION_PENALTY

    if candidate.popularity_count and candidate.popularity_count > 0:
        score += POPULARITY_WEIGHT * math.log10(candidate.popularity_count + 1)

    return score


def rank_candidates(
    candidates: Sequence[SearchCandidate], title: str, author: str
) -> list[ScoredCandidate]:
    """Score every candidate and sort by score descending.

    The sort is stable: candidates with equal scores keep their original
    order, so the first one Hardcover returned wins a tie.
    """
    scored = [
        ScoredCandidate(candidate=candidate, score=score_candidate(candidate, title, author))
        for candidate in candidates
    ]
    return sorted(scored, key=lambda s: s.score, reverse=True)


def select_best_match(
    candidates: Sequence[SearchCandidate], title: str, author: str
) -> SearchCandidate | None:
    """Return the highest-scoring candidate, or None for an empty candidate set."""
    if not candidates:
        return None

    ranked = rank_candidates(candidates, title, author)
    logger.debug(
        "Scored matches for %r by %r: %s",
        title,
        author,
        [
            {
                "title": s.candidate.title,
                "score": round(s.score, 2),
                "author_match": s.score >= AUTHOR_MATCH_WEIGHT - COLLECTION_PENALTY,
            }
            for s in ranked[:3]
        ],
    )
    return ranked[0].candidate
