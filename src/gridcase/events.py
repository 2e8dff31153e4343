"""Event definitions for the simulation event log."""

from enum import Enum
from typing import Dict, Any, Optional
from dataclasses import dataclass

class EventType(str, Enum):
    """Types of simulation events."""
    OVERLOAD_WARNING = "OVERLOAD_WARNING"
    NODE_FAIL = "NODE_FAIL"
    CASCADE_FAIL = "CASCADE_FAIL"
    NODE_RECOVER = "NODE_RECOVER"

class Severity(str, Enum):
    """Severity attached to an event log entry."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

@dataclass(frozen=True)
class EventLogEntry:
    """One notable occurrence during a run."""
    hour: int
    type: EventType
    node_id: str
    message: str
    severity: Severity
    zone_id: Optional[str] = None
    from_node_id: Optional[str] = None  # upstream cause of a cascade failure

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "hour": self.hour,
            "type": self.type.value,
            "node_id": self.node_id,
            "zone_id": self.zone_id,
            "from_node_id": self.from_node_id,
            "message": self.message,
            "severity": self.severity.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EventLogEntry':
        """Create from dictionary."""
        return cls(
            hour=data["hour"],
            type=EventType(data["type"]),
            node_id=data["node_id"],
            message=data.get("message", ""),
            severity=Severity(data.get("severity", "info")),
            zone_id=data.get("zone_id"),
            from_node_id=data.get("from_node_id"),
        )
