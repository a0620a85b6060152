"""
Card search handler package.

Exports CardSearchHandler and the underlying search function.
"""
from handlers.search.handler import CardSearchHandler
from handlers.search.query import search_cards, SearchResult, clamp_num_results

__all__ = ["CardSearchHandler", "search_cards", "SearchResult", "clamp_num_results"]
