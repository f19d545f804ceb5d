from abc import ABC, abstractmethod
from typing import Optional


class TokenSigner(ABC):
    @abstractmethod
    def sign(self, user_id: str) -> str: ...

    @abstractmethod
    def read_subject(self, token: str) -> Optional[str]:
        """User id carried by a well-signed, unexpired token; None otherwise."""
