import sqlite3
from datetime import datetime, timezone
from typing import Optional
from pathlib import Path
from uuid import uuid4

from core.entities.user import User
from core.repositories.user_repository import UserRepository, DuplicateEmailError


def create_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()
    cur.execute("""
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        avatar_url TEXT NOT NULL,
        subscription TEXT NOT NULL DEFAULT 'starter'
            CHECK (subscription IN ('starter', 'pro', 'business')),
        verify INTEGER NOT NULL DEFAULT 0,
        verification_token TEXT UNIQUE,
        token TEXT,
        created_at TEXT NOT NULL
    );
    """)
    conn.commit()


def init_db(db_path: str) -> None:
    if db_path != ":memory:" and not db_path.startswith("file:"):
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, check_same_thread=False)
    try:
        create_schema(conn)
    finally:
        conn.close()


class SQLiteUserRepository(UserRepository):
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            avatar_url=row["avatar_url"],
            created_at=row["created_at"],
            subscription=row["subscription"],
            verify=bool(row["verify"]),
            verification_token=row["verification_token"],
            token=row["token"],
        )

    def _update(self, user_id: str, sql: str, params: tuple) -> Optional[User]:
        cur = self.conn.cursor()
        cur.execute(sql, params + (user_id,))
        if cur.rowcount == 0:
            return None
        self.conn.commit()
        return self.get_by_id(user_id)

    def create_user(self, name: str, email: str, password_hash: str, avatar_url: str,
                    verification_token: str) -> User:
        user_id = uuid4().hex
        created_at = datetime.now(timezone.utc).isoformat()
        cur = self.conn.cursor()
        try:
            cur.execute(
                "INSERT INTO users (id, name, email, password_hash, avatar_url, verification_token, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (user_id, name, email, password_hash, avatar_url, verification_token, created_at),
            )
        except sqlite3.IntegrityError as e:
            self.conn.rollback()
            if "users.email" in str(e):
                raise DuplicateEmailError(email) from e
            raise
        self.conn.commit()
        return User(id=user_id, name=name, email=email, password_hash=password_hash,
                    avatar_url=avatar_url, created_at=created_at,
                    verification_token=verification_token)

    def get_by_id(self, user_id: str) -> Optional[User]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM users WHERE email = ?", (email,))
        row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_by_verification_token(self, verification_token: str) -> Optional[User]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM users WHERE verification_token = ?", (verification_token,))
        row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def mark_verified(self, verification_token: str) -> Optional[User]:
        user = self.get_by_verification_token(verification_token)
        if user is None:
            return None
        # keyed on the token too, so a concurrent verify of the same token matches nothing
        return self._update(
            user.id,
            "UPDATE users SET verify = 1, verification_token = NULL "
            "WHERE verification_token = ? AND verify = 0 AND id = ?",
            (verification_token,),
        )

    def set_token(self, user_id: str, token: Optional[str]) -> Optional[User]:
        return self._update(user_id, "UPDATE users SET token = ? WHERE id = ?", (token,))

    def update_subscription(self, user_id: str, subscription: str) -> Optional[User]:
        return self._update(user_id, "UPDATE users SET subscription = ? WHERE id = ?", (subscription,))

    def update_avatar(self, user_id: str, avatar_url: str) -> Optional[User]:
        return self._update(user_id, "UPDATE users SET avatar_url = ? WHERE id = ?", (avatar_url,))
