"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Title prefix lengths used when building outbound search queries.
# Store search pages and bookseller searches get the longer prefix,
# generic web searches the shorter one (the query also carries the brand).
STORE_QUERY_MAX_CHARS = 80
WEB_QUERY_MAX_CHARS = 60

# Placeholder substituted in catalog search templates.
QUERY_PLACEHOLDER = "{query}"

# Durable storage key for the process-wide on/off switch.
ENABLED_KEY = "enabled"
ENABLED_DEFAULT = True
