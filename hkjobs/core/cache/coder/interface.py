from abc import ABC, abstractmethod
from typing import Any


class Coder(ABC):
    """Turns decoded backend responses into cache entries and back."""

    @classmethod
    @abstractmethod
    def encode(cls, value: Any) -> bytes: ...

    @classmethod
    @abstractmethod
    def decode(cls, value: bytes | str) -> Any: ...
