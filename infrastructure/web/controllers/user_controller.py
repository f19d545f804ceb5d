import asyncio
import os
import shutil
import tempfile
from pathlib import Path
from typing import Literal, Optional, TypeVar

from fastapi import APIRouter, Depends, File, Header, HTTPException, Response, UploadFile, status
from pydantic import BaseModel, EmailStr, Field

from config.settings import settings
from core.entities.errors import Unauthorized
from core.entities.result import Err, Result
from core.entities.user import User
from core.repositories.user_repository import UserRepository
from core.services.credential_hasher import CredentialHasher
from core.services.image_transformer import ImageTransformer
from core.services.mailer import Mailer
from core.services.object_store import ObjectStore
from core.services.token_signer import TokenSigner
from core.use_cases.avatar_use_cases import update_avatar
from core.use_cases.session_use_cases import (
    authenticate_token,
    login_user,
    logout_user,
    update_subscription,
)
from core.use_cases.verification_use_cases import register_user, resend_verification, verify_email
from infrastructure.web.dependencies import (
    get_image_transformer,
    get_mailer,
    get_object_store,
    get_password_hasher,
    get_token_signer,
    get_user_repo,
)

router = APIRouter(prefix="/users", tags=["users"])

T = TypeVar("T")


def unwrap(result: Result[T]) -> T:
    """Ok -> value, Err -> HTTPException with the error's status and message"""
    if isinstance(result, Err):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(result.error, Unauthorized) else None
        raise HTTPException(status_code=result.error.status_code, detail=result.error.message, headers=headers)
    return result.value


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return authorization.split(" ", 1)[1]


async def get_current_user(
    token: str = Depends(get_bearer_token),
    repo: UserRepository = Depends(get_user_repo),
    signer: TokenSigner = Depends(get_token_signer),
) -> User:
    return unwrap(await authenticate_token(repo, signer, token))


# DTO
class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)


class ResendRequest(BaseModel):
    # пустой или отсутствующий email - 400, а не 422
    email: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SubscriptionRequest(BaseModel):
    subscription: Literal["starter", "pro", "business"]


class PublicUser(BaseModel):
    name: str
    email: EmailStr
    subscription: str


class RegisterResponse(BaseModel):
    user: PublicUser


class Profile(BaseModel):
    email: EmailStr
    subscription: str
    avatarURL: str


class LoginResponse(BaseModel):
    token: str
    user: Profile


class UserResponse(BaseModel):
    name: str
    email: EmailStr
    subscription: str
    avatarURL: str


class MessageResponse(BaseModel):
    message: str


class AvatarResponse(BaseModel):
    avatarURL: str


def to_profile(user: User) -> Profile:
    return Profile(email=user.email, subscription=user.subscription, avatarURL=user.avatar_url)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    payload: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: CredentialHasher = Depends(get_password_hasher),
    mailer: Mailer = Depends(get_mailer),
):
    user = unwrap(await register_user(repo, hasher, mailer, payload.name, payload.email, payload.password))
    return RegisterResponse(user=PublicUser(name=user.name, email=user.email, subscription=user.subscription))


@router.get("/verify/{verification_token}", response_model=MessageResponse)
def verify(verification_token: str, repo: UserRepository = Depends(get_user_repo)):
    unwrap(verify_email(repo, verification_token))
    return MessageResponse(message="Verification is successful")


@router.post("/verify", response_model=MessageResponse)
async def resend_verify_email(
    payload: Optional[ResendRequest] = None,
    repo: UserRepository = Depends(get_user_repo),
    mailer: Mailer = Depends(get_mailer),
):
    unwrap(await resend_verification(repo, mailer, payload.email if payload else None))
    return MessageResponse(message="Verification email has been sent successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: CredentialHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
):
    token, user = unwrap(await login_user(repo, hasher, signer, payload.email, payload.password))
    return LoginResponse(token=token, user=to_profile(user))


@router.get("/current", response_model=Profile)
def get_current(current_user: User = Depends(get_current_user)):
    return to_profile(current_user)


@router.post("/logout", status_code=204)
def logout(current_user: User = Depends(get_current_user), repo: UserRepository = Depends(get_user_repo)):
    unwrap(logout_user(repo, current_user.id))
    return Response(status_code=204)


@router.patch("/", response_model=UserResponse)
def change_subscription(
    payload: SubscriptionRequest,
    current_user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repo),
):
    updated = unwrap(update_subscription(repo, current_user.id, payload.subscription))
    return UserResponse(
        name=updated.name, email=updated.email, subscription=updated.subscription, avatarURL=updated.avatar_url
    )


def save_upload(upload: UploadFile) -> str:
    Path(settings.TEMP_DIR).mkdir(parents=True, exist_ok=True)
    suffix = os.path.splitext(upload.filename or "")[1]
    with tempfile.NamedTemporaryFile(delete=False, dir=settings.TEMP_DIR, suffix=suffix) as tmp:
        try:
            shutil.copyfileobj(upload.file, tmp)
        except Exception:
            tmp.close()
            os.remove(tmp.name)
            raise
        return tmp.name


@router.patch("/avatar", response_model=AvatarResponse)
async def change_avatar(
    avatar: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repo),
    transformer: ImageTransformer = Depends(get_image_transformer),
    store: ObjectStore = Depends(get_object_store),
):
    temp_path = await asyncio.to_thread(save_upload, avatar)
    updated = unwrap(
        await update_avatar(repo, transformer, store, current_user, temp_path, folder=settings.AVATAR_FOLDER)
    )
    return AvatarResponse(avatarURL=updated.avatar_url)
