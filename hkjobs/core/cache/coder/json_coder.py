import json
from typing import Any

from hkjobs.core.cache.coder.interface import Coder


class JsonCoder(Coder):
    """Raw JSON documents, stored exactly as the backend returned them."""

    @classmethod
    def encode(cls, value: Any) -> bytes:
        """Encode a value into bytes for storage in the cache using json."""
        return json.dumps(value, separators=(",", ":")).encode()

    @classmethod
    def decode(cls, value: bytes | str) -> Any:
        """Decode bytes back into the original value from the cache using json."""
        if isinstance(value, bytes):
            value = value.decode()
        return json.loads(value)
