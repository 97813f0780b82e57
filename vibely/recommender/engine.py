"""Pluggable recommendation engines.

Two engines share one interface:

- :class:`PersonalizedEngine` keeps a thread-safe store of users, venues and
  interactions for a personalization backend. Without a backend, or when the
  backend times out or fails, it has no opinion and returns an empty list.
- :class:`RuleBasedEngine` ignores ingestion and always defers to the
  fallback scorer.

Both engines rank fallback candidates through :func:`rank`, so scoring is the
same whichever engine is active.

Engines move through ``UNINITIALIZED -> INITIALIZING -> READY``. Ingestion
calls made before READY are queued and applied once, in arrival order, when
initialization completes. Queries made before READY return an empty list.
"""

import collections.abc
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from vibely.recommender.models import (
    InteractionEvent,
    PreferenceProfile,
    User,
    VenueAttributes,
)
from vibely.recommender.ranking import DEFAULT_LIMIT, rank

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_BACKEND_TIMEOUT_SECONDS = 0.5
DEFAULT_BACKEND_WORKERS = 4


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class InteractionLog(collections.abc.Sequence):
    """Read-only prefix of an append-only list of interaction events.

    The underlying list is only ever appended to, so the first ``length``
    items never change and can be shared with readers without copying.
    """

    def __init__(self, events: List[InteractionEvent], length: int):
        self._events = events
        self._length = length

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self._events[: self._length][index])
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError("interaction index out of range")
        return self._events[index]

    def __repr__(self) -> str:
        return f"InteractionLog(length={self._length})"


@dataclass(frozen=True)
class LearningSnapshot:
    """Read-only view of the personalized engine's store at one point in time."""

    users: Mapping[int, User] = field(default_factory=lambda: MappingProxyType({}))
    venues: Mapping[int, VenueAttributes] = field(default_factory=lambda: MappingProxyType({}))
    interactions: Sequence[InteractionEvent] = ()


class PersonalizationBackend(Protocol):
    """A learned model that can rank venues for a user.

    Implementations return an empty list when they have no opinion.
    """

    def recommend(self, user_id: int, count: int, snapshot: LearningSnapshot) -> List[int]:
        ...


class RecommendationEngine(ABC):
    """Common interface of the recommendation engines."""

    name: str = "base"

    @property
    @abstractmethod
    def state(self) -> EngineState:
        """Current lifecycle state."""

    @abstractmethod
    def initialize(self) -> None:
        """Run one-time setup. Calling it again has no further effect."""

    @abstractmethod
    def register_user(self, user: User) -> None:
        """Ingest a user or an updated quiz profile. Never raises."""

    @abstractmethod
    def register_venue(self, venue: VenueAttributes) -> None:
        """Ingest a venue. Never raises."""

    @abstractmethod
    def record_interaction(self, event: InteractionEvent) -> None:
        """Ingest an interaction event. Never raises."""

    @abstractmethod
    def recommend(self, user_id: int, count: int = DEFAULT_LIMIT) -> List[int]:
        """Return personalized venue ids, or [] when the engine has no opinion."""

    def fallback_recommend(
        self,
        profile: PreferenceProfile,
        venues: Sequence[VenueAttributes],
        limit: int = DEFAULT_LIMIT,
    ) -> List[int]:
        """Rank venues with the rule-based scorer."""
        return rank(profile, venues, limit)

    def stats(self) -> Dict[str, Any]:
        return {}

    def close(self) -> None:
        """Release resources held by the engine."""


class PersonalizedEngine(RecommendationEngine):
    """Stateful engine that collects learning signals for a backend.

    Mutations are serialized by a single lock. Queries read an immutable
    snapshot that is rebuilt lazily after the store changes.
    """

    name = "personalized"

    def __init__(
        self,
        backend: Optional[PersonalizationBackend] = None,
        timeout_seconds: float = DEFAULT_BACKEND_TIMEOUT_SECONDS,
    ):
        """Initialize the engine.

        Args:
            backend: Optional learned model queried by :meth:`recommend`.
            timeout_seconds: Maximum time to wait for the backend. A timeout
                is treated as no opinion.
        """
        self._backend = backend
        self._timeout_seconds = timeout_seconds
        self._executor: Optional[ThreadPoolExecutor] = None
        if backend is not None:
            self._executor = ThreadPoolExecutor(
                max_workers=DEFAULT_BACKEND_WORKERS,
                thread_name_prefix="personalization",
            )

        self._lock = threading.Lock()
        self._state = EngineState.UNINITIALIZED
        self._users: Dict[int, User] = {}
        self._venues: Dict[int, VenueAttributes] = {}
        self._interactions: List[InteractionEvent] = []
        self._pending: List[Tuple[str, Callable[[Any], None], Any]] = []
        self._snapshot = LearningSnapshot()
        self._dirty = False

    @property
    def state(self) -> EngineState:
        return self._state

    def initialize(self) -> None:
        with self._lock:
            if self._state is not EngineState.UNINITIALIZED:
                logger.debug("Initialize called again, ignoring", extra={"state": self._state.value})
                return
            self._state = EngineState.INITIALIZING

        logger.info("Initializing personalized engine")

        # Drain and flip to READY in one critical section so no call is lost
        with self._lock:
            pending, self._pending = self._pending, []
            for operation, apply, payload in pending:
                self._apply_safely(operation, apply, payload)
            self._state = EngineState.READY

        logger.info(
            "Personalized engine ready",
            extra={"replayed_operations": len(pending), **self.stats()},
        )

    def register_user(self, user: User) -> None:
        self._ingest("register_user", self._apply_user, user)

    def register_venue(self, venue: VenueAttributes) -> None:
        self._ingest("register_venue", self._apply_venue, venue)

    def record_interaction(self, event: InteractionEvent) -> None:
        self._ingest("record_interaction", self._apply_interaction, event)

    def recommend(self, user_id: int, count: int = DEFAULT_LIMIT) -> List[int]:
        if count <= 0:
            return []

        if self._state is not EngineState.READY:
            logger.debug("Engine not ready, no opinion", extra={"user_id": user_id})
            return []

        if self._backend is None or self._executor is None:
            return []

        snapshot = self.snapshot()
        future = self._executor.submit(self._backend.recommend, user_id, count, snapshot)
        try:
            venue_ids = [int(vid) for vid in future.result(timeout=self._timeout_seconds)]
        except FuturesTimeoutError:
            future.cancel()
            logger.warning(
                "Personalization backend timed out",
                extra={"user_id": user_id, "timeout_seconds": self._timeout_seconds},
            )
            return []
        except Exception as e:
            # Covers backend errors and malformed results alike
            logger.error(
                "Personalization backend failed",
                extra={"user_id": user_id, "error": str(e), "error_type": type(e).__name__},
                exc_info=True,
            )
            return []

        return venue_ids[:count]

    def snapshot(self) -> LearningSnapshot:
        """Return a read-only view of the current store.

        A clean snapshot is returned without taking the lock. After a
        mutation the user and venue maps are copied once; interactions are
        shared as a bounded view of the append-only log, never copied.
        """
        if not self._dirty:
            return self._snapshot
        with self._lock:
            if self._dirty:
                self._snapshot = LearningSnapshot(
                    users=MappingProxyType(dict(self._users)),
                    venues=MappingProxyType(dict(self._venues)),
                    interactions=InteractionLog(self._interactions, len(self._interactions)),
                )
                self._dirty = False
            return self._snapshot

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "num_users": len(self._users),
                "num_venues": len(self._venues),
                "num_interactions": len(self._interactions),
                "num_pending": len(self._pending),
            }

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def _ingest(self, operation: str, apply: Callable[[Any], None], payload: Any) -> None:
        with self._lock:
            if self._state is not EngineState.READY:
                self._pending.append((operation, apply, payload))
                return
            self._apply_safely(operation, apply, payload)

    def _apply_safely(self, operation: str, apply: Callable[[Any], None], payload: Any) -> None:
        # Caller holds the lock
        try:
            apply(payload)
            self._dirty = True
        except Exception as e:
            logger.error(
                "Ingestion failed",
                extra={"operation": operation, "error": str(e), "error_type": type(e).__name__},
                exc_info=True,
            )

    def _apply_user(self, user: User) -> None:
        self._users[user.id] = user

    def _apply_venue(self, venue: VenueAttributes) -> None:
        self._venues[venue.id] = venue

    def _apply_interaction(self, event: InteractionEvent) -> None:
        self._interactions.append(event)


class RuleBasedEngine(RecommendationEngine):
    """Stateless engine that always defers to the fallback scorer."""

    name = "rule_based"

    def __init__(self):
        self._state = EngineState.UNINITIALIZED

    @property
    def state(self) -> EngineState:
        return self._state

    def initialize(self) -> None:
        if self._state is not EngineState.READY:
            self._state = EngineState.READY
            logger.info("Rule-based engine ready")

    def register_user(self, user: User) -> None:
        pass

    def register_venue(self, venue: VenueAttributes) -> None:
        pass

    def record_interaction(self, event: InteractionEvent) -> None:
        pass

    def recommend(self, user_id: int, count: int = DEFAULT_LIMIT) -> List[int]:
        return []
