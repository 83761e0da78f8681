"""
Restaurant lookup engine.

Responsibilities:
- Accept keyword, proximity and single-record queries.
- Serve provider-backed results through a time-based cache.
- Fall back to the bundled restaurant dataset when the provider is unavailable.
- Return normalized Restaurant records ready for API serialisation.
"""
