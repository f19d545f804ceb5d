from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from core.services.token_signer import TokenSigner


class JoseTokenSigner(TokenSigner):
    """JWT carrying the user id in `sub`, expiring after a fixed delta"""
    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_delta: timedelta = timedelta(hours=23)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def sign(self, user_id: str) -> str:
        expire = datetime.now(timezone.utc) + self.expires_delta
        return jwt.encode({"sub": user_id, "exp": expire}, self.secret_key, algorithm=self.algorithm)

    def read_subject(self, token: str) -> Optional[str]:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        sub = payload.get("sub")
        return sub if isinstance(sub, str) and sub else None
