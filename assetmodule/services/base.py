"""
Base class for all services.

Services subscribe to build lifecycle events on the event bus, handle
them, and return follow-up events.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from assetmodule.core.events import Event, EventBus, Subscription


class Service(ABC):
    """
    Base class for all services.
    
    Services are components that:
    1. Subscribe to specific event types
    2. Process those events
    3. Emit new events as a result
    """
    
    @property
    @abstractmethod
    def service_id(self) -> str:
        """Unique identifier for this service."""
        pass
    
    @property
    @abstractmethod
    def subscribes_to(self) -> list[str]:
        """
        List of event patterns this service handles.
        
        Supports wildcards like "build.*" or "module.succeeded".
        """
        pass
    
    @abstractmethod
    async def handle(self, event: Event) -> list[Event]:
        """
        Handle an event and return any resulting events.
        
        Args:
            event: The event to process
            
        Returns:
            List of events produced by handling this event
            (can be empty if no follow-up events needed)
        """
        pass
    
    def register(self, bus: EventBus) -> list[Subscription]:
        """Subscribe ``handle`` to every pattern in ``subscribes_to``."""
        return [bus.subscribe(pattern, self.handle) for pattern in self.subscribes_to]
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.service_id})>"
