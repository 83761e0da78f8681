"""
Restaurant Finder API.

Keyword and proximity restaurant search over a places provider, with a
bundled dataset fallback and time-based response caching.
"""
