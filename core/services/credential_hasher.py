from abc import ABC, abstractmethod


class CredentialHasher(ABC):
    @abstractmethod
    def hash(self, password: str) -> str: ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool: ...

    @abstractmethod
    def dummy_verify(self) -> None:
        """Spend the time of one verify, used when there is no stored hash to check."""
