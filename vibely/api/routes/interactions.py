"""Interaction tracking endpoint."""

from fastapi import APIRouter, Depends

from vibely.api.dependencies import get_service
from vibely.recommender.models import InteractionEvent
from vibely.service import RecommendationService

router = APIRouter(
    prefix="/api/interactions",
    tags=["interactions"],
)


@router.post("", response_model=InteractionEvent)
def record_interaction(
    event: InteractionEvent,
    service: RecommendationService = Depends(get_service),
) -> InteractionEvent:
    """Record a user interaction as a learning signal.

    Ingestion is best-effort: failures are logged and the event is still
    echoed back.
    """
    service.ingest_interaction(event)
    return event
