"""
Simulated Web Search

Ranks a fixed provider corpus against a query. The ranked results stand in
for web search findings in the agent prompts.

Key Components:
- tokenize / text_overlap: free-text scoring
- CorpusStore: process-wide, lazily loaded provider data
- search: deterministic weighted ranking
"""

from .tokenizer import tokenize, text_overlap
from .corpus import CorpusStore, get_corpus_store, reset_corpus_store
from .engine import SearchInput, SearchResult, score_provider, search, search_providers

__all__ = [
    "tokenize",
    "text_overlap",
    "CorpusStore",
    "get_corpus_store",
    "reset_corpus_store",
    "SearchInput",
    "SearchResult",
    "score_provider",
    "search",
    "search_providers",
]
