"""Exception context management."""

import threading
from datetime import datetime, timezone
from typing import Any, Dict


class ExceptionContext:
    """Context information attached to remote operation failures."""

    def __init__(self, operation: str, target: str, layer: str = "infrastructure", **additional_context):
        self.operation = operation
        self.target = target
        self.layer = layer
        self.timestamp = datetime.now(timezone.utc)
        self.thread_id = threading.get_ident()
        self.additional_context = additional_context

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for logging."""
        return {
            "operation": self.operation,
            "target": self.target,
            "layer": self.layer,
            "timestamp": self.timestamp.isoformat(),
            "thread_id": self.thread_id,
            **self.additional_context,
        }
