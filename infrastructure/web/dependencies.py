import sqlite3
from datetime import timedelta
from functools import lru_cache

from fastapi import Depends

from config.settings import settings
from core.repositories.user_repository import UserRepository
from core.services.credential_hasher import CredentialHasher
from core.services.image_transformer import ImageTransformer
from core.services.mailer import Mailer
from core.services.object_store import ObjectStore
from core.services.token_signer import TokenSigner
from infrastructure.db.sqlite import SQLiteUserRepository
from infrastructure.images.pillow_transformer import PillowImageTransformer
from infrastructure.mail.smtp_mailer import SmtpMailer
from infrastructure.mail.stub_mailer import StubMailer
from infrastructure.security.jose_signer import JoseTokenSigner
from infrastructure.security.passlib_hasher import PasslibCredentialHasher
from infrastructure.storage.local_store import LocalObjectStore
from infrastructure.storage.supabase_store import build_supabase_store


def get_db():
    conn = sqlite3.connect(settings.DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def get_user_repo(conn: sqlite3.Connection = Depends(get_db)) -> UserRepository:
    return SQLiteUserRepository(conn)


@lru_cache()
def get_password_hasher() -> CredentialHasher:
    return PasslibCredentialHasher(rounds=settings.BCRYPT_ROUNDS)


@lru_cache()
def get_token_signer() -> TokenSigner:
    return JoseTokenSigner(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


# без SMTP письма остаются в памяти и пишутся в лог
@lru_cache()
def get_mailer() -> Mailer:
    if not settings.SMTP_HOST:
        return StubMailer()
    return SmtpMailer(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        sender=settings.MAIL_SENDER,
        user=settings.SMTP_USER,
        password=settings.SMTP_PASSWORD,
    )


def get_image_transformer() -> ImageTransformer:
    return PillowImageTransformer()


@lru_cache()
def get_object_store() -> ObjectStore:
    if settings.SUPABASE_URL and settings.SUPABASE_KEY:
        return build_supabase_store(settings.SUPABASE_URL, settings.SUPABASE_KEY, settings.SUPABASE_BUCKET)
    return LocalObjectStore(settings.PUBLIC_DIR, settings.PUBLIC_BASE_URL)
