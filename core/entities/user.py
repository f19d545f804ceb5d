from dataclasses import dataclass
from typing import Optional

SUBSCRIPTION_PLANS = ("starter", "pro", "business")


@dataclass
class User:
    id: str
    name: str
    email: str
    password_hash: str
    avatar_url: str
    created_at: str
    subscription: str = "starter"  # starter | pro | business
    verify: bool = False
    verification_token: Optional[str] = None  # set while verify is False
    token: Optional[str] = None  # current session, None when logged out
