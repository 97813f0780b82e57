"""FastAPI dependencies shared by the route modules."""

from fastapi import Request

from vibely.config import Settings
from vibely.service import RecommendationService
from vibely.storage import InMemoryStorage


def get_service(request: Request) -> RecommendationService:
    return request.app.state.service


def get_storage(request: Request) -> InMemoryStorage:
    return request.app.state.storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
