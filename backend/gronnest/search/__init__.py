from .ranker import RelevanceRanker, dedupe, relevance_score
from .local_terms import LOCAL_TERMS, LocalTerm, match_local_terms

__all__ = [
    "RelevanceRanker",
    "dedupe",
    "relevance_score",
    "LOCAL_TERMS",
    "LocalTerm",
    "match_local_terms",
]
