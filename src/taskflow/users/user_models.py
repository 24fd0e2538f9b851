# src/taskflow/users/user_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..core.clock import new_id, parse_datetime, to_iso, utcnow
from ..core.errors import ValidationError


def _clean_username(username: Any) -> str:
    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username wajib diisi")
    return username.strip()


def _clean_email(email: Any) -> str:
    if not isinstance(email, str) or "@" not in email or not email.strip():
        raise ValidationError(f"Email tidak valid: '{email}'")
    return email.strip()


@dataclass(slots=True)
class User:
    id: str
    username: str
    email: str
    created_at: datetime
    full_name: str = ""
    is_active: bool = True
    last_login_at: datetime | None = None

    @classmethod
    def create(cls, *, username: str, email: str, full_name: str | None = None) -> User:
        return cls(
            id=new_id(),
            username=_clean_username(username),
            email=_clean_email(email),
            full_name=(full_name or "").strip(),
            created_at=utcnow(),
        )

    def update_profile(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        full_name: str | None = None,
    ) -> None:
        # Validate everything first so a bad email does not leave a half-renamed user.
        new_username = _clean_username(username) if username is not None else self.username
        new_email = _clean_email(email) if email is not None else self.email
        self.username = new_username
        self.email = new_email
        if full_name is not None:
            self.full_name = full_name.strip()

    def record_login(self) -> None:
        self.last_login_at = utcnow()

    def deactivate(self) -> None:
        self.is_active = False

    def activate(self) -> None:
        self.is_active = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "full_name": self.full_name,
            "is_active": self.is_active,
            "last_login_at": to_iso(self.last_login_at),
            "created_at": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        if not isinstance(data, dict) or "id" not in data:
            raise ValidationError(f"Data user tidak valid: {data!r}")
        return cls(
            id=str(data["id"]),
            username=_clean_username(data.get("username")),
            email=_clean_email(data.get("email")),
            full_name=str(data.get("full_name") or ""),
            is_active=bool(data.get("is_active", True)),
            last_login_at=parse_datetime(data.get("last_login_at")),
            created_at=parse_datetime(data.get("created_at")) or utcnow(),
        )
