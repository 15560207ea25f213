"""
Event system for assetmodule.

The host build reports its lifecycle through the event bus: a pass starts,
modules finish processing (any number of times), and the pass finishes
emitting its own outputs. Services subscribe to the events they care about
and return follow-up events.
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable

from assetmodule.core.errors import ConfigurationError
from assetmodule.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)

# Type for event handlers
EventHandler = Callable[["Event"], Awaitable[list["Event"]]]

# Event types
BUILD_STARTED = "build.started"
MODULE_SUCCEEDED = "module.succeeded"
BUILD_AFTER_EMIT = "build.after_emit"
ASSETS_EMITTED = "assets.emitted"
ASSETS_FAILED = "assets.failed"


@dataclass
class Event:
    """
    An event in the build lifecycle.

    ``build_id`` ties every event of one build pass together.
    """

    event_type: str  # e.g., "module.succeeded", "build.after_emit"
    build_id: str
    payload: dict[str, Any] = field(default_factory=dict)

    # Tracing
    id: str = field(default_factory=lambda: generate_id("evt"))
    causation_id: str | None = None  # Event that caused this one

    # Timing
    timestamp: datetime = field(default_factory=utc_now)

    def caused_by(self, parent: Event) -> Event:
        """Return a copy of this event marked as caused by ``parent``."""
        return Event(
            event_type=self.event_type,
            build_id=self.build_id,
            payload=self.payload,
            causation_id=parent.id,
        )


@dataclass
class Subscription:
    """A subscription to events matching a pattern."""

    pattern: str  # e.g., "build.*" or "module.succeeded"
    handler: EventHandler
    build_id: str | None = None  # Only events for this build, if set

    def matches(self, event: Event) -> bool:
        """Check if this subscription matches the given event."""
        if not fnmatch.fnmatch(event.event_type, self.pattern):
            return False
        if self.build_id is not None and event.build_id != self.build_id:
            return False
        return True


class EventBus:
    """
    In-memory event bus.

    Handler failures are logged and don't stop other handlers, except
    configuration errors, which abort the publish.
    """

    def __init__(self, max_history: int = 10000):
        self._subscriptions: list[Subscription] = []
        self._event_history: list[Event] = []
        self._max_history = max_history

    def subscribe(
        self,
        pattern: str,
        handler: EventHandler,
        build_id: str | None = None,
    ) -> Subscription:
        """
        Subscribe to events matching a pattern.

        Args:
            pattern: Event type pattern (supports wildcards like "build.*")
            handler: Async function to handle matching events
            build_id: Restrict the subscription to one build pass

        Returns:
            The subscription object (can be used to unsubscribe)
        """
        subscription = Subscription(pattern=pattern, handler=handler, build_id=build_id)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription."""
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def publish(self, event: Event) -> list[Event]:
        """
        Publish an event and return any events produced by handlers.

        Events returned by handlers are published in turn.
        """
        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            self._event_history = self._event_history[-self._max_history:]

        matching = [s for s in self._subscriptions if s.matches(event)]

        all_resulting_events: list[Event] = []

        for subscription in matching:
            try:
                resulting_events = await subscription.handler(event)
            except ConfigurationError:
                raise
            except Exception:
                logger.exception(f"Error in event handler for {event.event_type}")
                continue
            all_resulting_events.extend(e.caused_by(event) for e in resulting_events)

        for resulting_event in list(all_resulting_events):
            cascade_events = await self.publish(resulting_event)
            all_resulting_events.extend(cascade_events)

        return all_resulting_events

    async def publish_many(self, events: list[Event]) -> list[Event]:
        """Publish multiple events in order and return all resulting events."""
        all_results: list[Event] = []
        for event in events:
            results = await self.publish(event)
            all_results.extend(results)
        return all_results

    def get_history(
        self,
        event_type: str | None = None,
        build_id: str | None = None,
        limit: int = 100,
    ) -> list[Event]:
        """Query event history with optional filters."""
        results = self._event_history

        if event_type:
            results = [e for e in results if fnmatch.fnmatch(e.event_type, event_type)]

        if build_id:
            results = [e for e in results if e.build_id == build_id]

        return results[-limit:]


# Convenience functions for the host lifecycle
def build_started(
    build_id: str,
    public_path: str | None = None,
    output_file_system: Any = None,
    **extra_payload,
) -> Event:
    """
    Create a build.started event.

    ``public_path`` is left out of the payload when not given, so the
    emitter falls back to its own default. An empty string is kept.
    """
    payload: dict[str, Any] = {"output_file_system": output_file_system, **extra_payload}
    if public_path is not None:
        payload["public_path"] = public_path
    return Event(event_type=BUILD_STARTED, build_id=build_id, payload=payload)


def module_succeeded(build_id: str, module: Any, **extra_payload) -> Event:
    """Create a module.succeeded event."""
    return Event(
        event_type=MODULE_SUCCEEDED,
        build_id=build_id,
        payload={"module": module, **extra_payload},
    )


def build_after_emit(build_id: str, **extra_payload) -> Event:
    """Create a build.after_emit event."""
    return Event(
        event_type=BUILD_AFTER_EMIT,
        build_id=build_id,
        payload=extra_payload,
    )
