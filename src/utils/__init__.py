"""
Shared utilities: settings, logging, database plumbing and API responses.
"""
