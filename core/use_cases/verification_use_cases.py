import asyncio
import hashlib
import logging
import secrets
from typing import Optional

from core.entities.errors import BadRequest, Conflict, NotFound
from core.entities.result import Err, Ok, Result
from core.entities.user import User
from core.repositories.user_repository import UserRepository, DuplicateEmailError
from core.services.credential_hasher import CredentialHasher
from core.services.mailer import Mailer, MailMessage

logger = logging.getLogger(__name__)

GRAVATAR_URL = "https://www.gravatar.com/avatar/{digest}?s=250&d=identicon"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def default_avatar_url(email: str) -> str:
    digest = hashlib.md5(normalize_email(email).encode("utf-8")).hexdigest()
    return GRAVATAR_URL.format(digest=digest)


def new_verification_token() -> str:
    return secrets.token_urlsafe(16)


def build_verification_email(user: User) -> MailMessage:
    # the code is typed in by the user, so no link is sent
    html = (
        f"<p>{user.name}, please verify your account. Your verification code is "
        f'<span style="color:blue; font-weight: 700"> {user.verification_token} </span></p>'
        "<p> With love your Phonebook App</p>"
    )
    return MailMessage(to=user.email, subject="Verify email", html=html)


async def register_user(
    repo: UserRepository,
    hasher: CredentialHasher,
    mailer: Mailer,
    name: str,
    email: str,
    password: str,
) -> Result[User]:
    email = normalize_email(email)
    if repo.get_by_email(email) is not None:
        return Err(Conflict("Email is already in use"))

    password_hash = await asyncio.to_thread(hasher.hash, password)
    try:
        user = repo.create_user(
            name=name.strip(),
            email=email,
            password_hash=password_hash,
            avatar_url=default_avatar_url(email),
            verification_token=new_verification_token(),
        )
    except DuplicateEmailError:
        # lost the race against a concurrent registration
        return Err(Conflict("Email is already in use"))

    logger.info("Registered user %s", user.id)
    await asyncio.to_thread(mailer.send, build_verification_email(user))
    return Ok(user)


def verify_email(repo: UserRepository, verification_token: str) -> Result[User]:
    user = repo.mark_verified(verification_token)
    if user is None:
        return Err(NotFound("User not found"))
    logger.info("Verified user %s", user.id)
    return Ok(user)


async def resend_verification(repo: UserRepository, mailer: Mailer, email: Optional[str]) -> Result[User]:
    if not email or not email.strip():
        return Err(BadRequest("missing required field email"))

    user = repo.get_by_email(normalize_email(email))
    if user is None:
        return Err(NotFound("User not found"))
    if user.verify:
        return Err(BadRequest("Verification has already been passed"))

    await asyncio.to_thread(mailer.send, build_verification_email(user))
    return Ok(user)
