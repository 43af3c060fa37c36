"""
Backend package for the greeting card service.

This package provides a FastAPI application with storage and database
abstractions around the card editing core: design documents, the card
gateway, the template library and share links.
"""
