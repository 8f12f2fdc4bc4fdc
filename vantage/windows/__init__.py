"""Windows decide which values a store returns for a projection.

- PassThrough: only the final projection (the default)
- TriggerWindow: values emitted by a trigger callback, then the final projection
"""

from .trigger import Continue, Decision, Emit, EmitAdjusted, Trigger, TriggerWindow
from .window import PassThrough, Window

__all__ = [
    "Window",
    "PassThrough",
    "TriggerWindow",
    "Trigger",
    "Decision",
    "Emit",
    "EmitAdjusted",
    "Continue",
]
