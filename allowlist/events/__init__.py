"""
Events Module

Provides event recording for registry and claim outcomes.
Events give clients a record of verifications, rotations and redemptions.
"""

from .models import (
    Event,
    EventKind,
    RootInitialized,
    RootRotated,
    ProofVerified,
    Redeemed,
)
from .recorder import EventRecorder, EventSubscriber, generate_event_id

__all__ = [
    "Event",
    "EventKind",
    "RootInitialized",
    "RootRotated",
    "ProofVerified",
    "Redeemed",
    "EventRecorder",
    "EventSubscriber",
    "generate_event_id",
]
