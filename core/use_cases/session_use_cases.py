import asyncio
import logging
from typing import Tuple

from core.entities.errors import BadRequest, NotFound, Unauthorized
from core.entities.result import Err, Ok, Result
from core.entities.user import SUBSCRIPTION_PLANS, User
from core.repositories.user_repository import UserRepository
from core.services.credential_hasher import CredentialHasher
from core.services.token_signer import TokenSigner
from core.use_cases.verification_use_cases import normalize_email

logger = logging.getLogger(__name__)

WRONG_CREDENTIALS = "Email or password is wrong"


async def login_user(
    repo: UserRepository,
    hasher: CredentialHasher,
    signer: TokenSigner,
    email: str,
    password: str,
) -> Result[Tuple[str, User]]:
    """Check credentials and make a fresh token the user's only valid session.

    The password is checked before the verification state and unknown emails
    still pay for one hash verification, so a failed guess looks the same
    whether or not the account exists or is verified.
    """
    user = repo.get_by_email(normalize_email(email))
    if user is None:
        await asyncio.to_thread(hasher.dummy_verify)
        logger.warning("Login rejected: unknown email")
        return Err(Unauthorized(WRONG_CREDENTIALS))

    if not await asyncio.to_thread(hasher.verify, password, user.password_hash):
        logger.warning("Login rejected: wrong password for user %s", user.id)
        return Err(Unauthorized(WRONG_CREDENTIALS))

    if not user.verify:
        return Err(Unauthorized("Please verify your email"))

    token = await asyncio.to_thread(signer.sign, user.id)
    updated = repo.set_token(user.id, token)
    if updated is None:
        return Err(Unauthorized(WRONG_CREDENTIALS))
    logger.info("User %s logged in", user.id)
    return Ok((token, updated))


async def authenticate_token(repo: UserRepository, signer: TokenSigner, token: str) -> Result[User]:
    user_id = await asyncio.to_thread(signer.read_subject, token)
    if user_id is None:
        return Err(Unauthorized())

    user = repo.get_by_id(user_id)
    # a token that still verifies but is no longer the stored one was logged out or replaced
    if user is None or not user.token or user.token != token:
        return Err(Unauthorized())
    return Ok(user)


def logout_user(repo: UserRepository, user_id: str) -> Result[User]:
    updated = repo.set_token(user_id, None)
    if updated is None:
        return Err(NotFound("Not found"))
    logger.info("User %s logged out", user_id)
    return Ok(updated)


def update_subscription(repo: UserRepository, user_id: str, subscription: str) -> Result[User]:
    subscription = subscription.lower().strip()
    if subscription not in SUBSCRIPTION_PLANS:
        return Err(BadRequest("Invalid subscription"))
    updated = repo.update_subscription(user_id, subscription)
    if updated is None:
        return Err(NotFound("Not found"))
    return Ok(updated)
