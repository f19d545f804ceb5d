from passlib.context import CryptContext

from core.services.credential_hasher import CredentialHasher


class PasslibCredentialHasher(CredentialHasher):
    """bcrypt through passlib"""
    def __init__(self, rounds: int = 10):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self.pwd_context.verify(password, password_hash)

    def dummy_verify(self) -> None:
        self.pwd_context.dummy_verify()
