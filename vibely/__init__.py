"""Vibely: venue recommendation service.

This package provides a backend service that recommends cafes to users from
their quiz answers and, when credentials are configured, a personalization
engine.

Modules:
    api: FastAPI application and REST API endpoints
    recommender: geo filtering, rule-based scoring and engine selection
"""

__version__ = "0.1.0"
