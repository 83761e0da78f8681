"""
Places provider layer.

Responsibilities:
- Manage provider configuration and credentials.
- Call the places-search, details and geocoding endpoints over HTTP.
- Map raw provider records into the internal Restaurant shape.
- Compute great-circle distances for proximity results.
"""
