"""
Session Module - Runs the identification loop.

A detection session ties the recognition layer to its collaborators:

    Camera -> Detector -> BeliefEngine/HistoryLedger -> OverlaySink / InfoSink / VoiceSink

Sessions are EPHEMERAL:
- Belief state, history and markers live only while the session does
- Nothing is written to disk
"""

from .detection_session import (
    DetectionSession,
    SessionState,
    TickResult,
    OverlayDiff,
    UNKNOWN_EQUIPMENT,
)
from .sinks import (
    OverlaySink,
    InfoSink,
    VoiceSink,
    OverlayMarker,
    OverlayBoard,
    InfoPanel,
    VoiceLog,
)
from .manager import SessionManager, ManagedSession

__all__ = [
    "DetectionSession",
    "SessionState",
    "TickResult",
    "OverlayDiff",
    "UNKNOWN_EQUIPMENT",
    "OverlaySink",
    "InfoSink",
    "VoiceSink",
    "OverlayMarker",
    "OverlayBoard",
    "InfoPanel",
    "VoiceLog",
    "SessionManager",
    "ManagedSession",
]
