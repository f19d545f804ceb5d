from abc import ABC, abstractmethod
from typing import Optional
from core.entities.user import User


class DuplicateEmailError(ValueError):
    """Raised by create_user when the storage uniqueness constraint rejects the email."""


class UserRepository(ABC):
    @abstractmethod
    def create_user(self, name: str, email: str, password_hash: str, avatar_url: str,
                    verification_token: str) -> User:...

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:...

    @abstractmethod
    def get_by_verification_token(self, verification_token: str) -> Optional[User]:...

    @abstractmethod
    def mark_verified(self, verification_token: str) -> Optional[User]:
        """Flip verify and clear the token in one update; None if no user holds the token."""

    @abstractmethod
    def set_token(self, user_id: str, token: Optional[str]) -> Optional[User]:...

    @abstractmethod
    def update_subscription(self, user_id: str, subscription: str) -> Optional[User]:...

    @abstractmethod
    def update_avatar(self, user_id: str, avatar_url: str) -> Optional[User]:...
