# ABOUTME: ScoredCandidate pairs a search candidate with its match score.
# ABOUTME: Produced by the scorer so callers can inspect the full ranking, not just the winner.

from dataclasses import dataclass

from hardshelf.catalog.types import SearchCandidate


@dataclass
class ScoredCandidate:
    """A search candidate with its deterministic match score.

    The score depends only on the candidate and the target title and
    author, so two rankings of the same input are always identical.
    """

    candidate: SearchCandidate
    score: float
