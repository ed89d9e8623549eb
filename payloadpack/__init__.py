"""payloadpack - deterministic in-memory payloads packaged as zip, trees, or text dumps.

Producers write generated artifacts into named slots; the packaging stage
serializes the whole collection once, in a stable order.
"""

__version__ = "0.1.0"
__author__ = "payloadpack Contributors"

from payloadpack.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
