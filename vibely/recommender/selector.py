"""Engine selection and startup backfill.

The engine is chosen once, from the settings passed in at application
construction, and is not swapped afterwards.
"""

import logging
import threading
from typing import Optional

from vibely.config import Settings
from vibely.recommender.engine import (
    PersonalizationBackend,
    PersonalizedEngine,
    RecommendationEngine,
    RuleBasedEngine,
)
from vibely.storage import VenueStorage

# Configure module logger
logger = logging.getLogger(__name__)


def select_engine(
    settings: Settings,
    backend: Optional[PersonalizationBackend] = None,
) -> RecommendationEngine:
    """Choose the recommendation engine for this process.

    The personalized engine is used only when both credential settings are
    present and non-blank. Missing credentials are not an error.

    Args:
        settings: Application settings.
        backend: Optional learned model for the personalized engine.

    Returns:
        An uninitialized engine.
    """
    if settings.personalization_enabled:
        logger.info("Using personalized recommendation engine")
        return PersonalizedEngine(
            backend=backend,
            timeout_seconds=settings.PERSONALIZATION_TIMEOUT_SECONDS,
        )

    logger.info("Using rule-based recommendation engine (no personalization credentials)")
    return RuleBasedEngine()


class EngineWarmup:
    """One-time backfill of known venues into a freshly selected engine.

    Runs in a background thread so the server accepts requests immediately.
    Every venue is pushed through ``register_venue`` before the engine is
    initialized, so it is READY only once the backfill has been applied.
    Failures are logged and never abort startup.
    """

    def __init__(self, engine: RecommendationEngine, storage: VenueStorage):
        self.engine = engine
        self.storage = storage
        self.venue_count = 0
        self.failures = 0
        self._started = False
        self._start_lock = threading.Lock()
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def start(self) -> None:
        """Start the backfill thread. Later calls do nothing."""
        with self._start_lock:
            if self._started:
                return
            self._started = True
            self._thread = threading.Thread(
                target=self.run,
                name="engine-warmup",
                daemon=True,
            )
            self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the backfill to finish. Returns True if it finished."""
        return self._done.wait(timeout)

    def run(self) -> None:
        """Backfill venues and initialize the engine."""
        try:
            try:
                venues = self.storage.list_all_venues()
            except Exception as e:
                logger.error(
                    "Failed to list venues for backfill",
                    extra={"error": str(e), "error_type": type(e).__name__},
                    exc_info=True,
                )
                self.failures += 1
                venues = []

            # TODO: batch the backfill once the backend exposes a bulk ingest call
            for venue in venues:
                try:
                    self.engine.register_venue(venue)
                    self.venue_count += 1
                except Exception as e:
                    self.failures += 1
                    logger.warning(
                        "Failed to backfill venue",
                        extra={"venue_id": venue.id, "error": str(e)},
                    )

            try:
                self.engine.initialize()
            except Exception as e:
                self.failures += 1
                logger.error(
                    "Failed to initialize recommendation engine",
                    extra={"engine": self.engine.name, "error": str(e)},
                    exc_info=True,
                )
                return

            logger.info(
                "Recommendation engine ready",
                extra={
                    "engine": self.engine.name,
                    "num_venues": self.venue_count,
                    "num_failures": self.failures,
                },
            )
        finally:
            self._done.set()
