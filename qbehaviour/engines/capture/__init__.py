"""
Capture Engine - collects submitted files and free text for grading.
"""

from qbehaviour.engines.capture.config_lookup import (
    ConfigLookup,
    InMemoryConfigLookup,
    SqlConfigLookup,
)
from qbehaviour.engines.capture.content_store import ContentStore, InMemoryContentStore
from qbehaviour.engines.capture.response_capture import (
    CaptureError,
    ResponseBundle,
    ResponseCapture,
)

__all__ = [
    "ConfigLookup",
    "InMemoryConfigLookup",
    "SqlConfigLookup",
    "ContentStore",
    "InMemoryContentStore",
    "CaptureError",
    "ResponseBundle",
    "ResponseCapture",
]
