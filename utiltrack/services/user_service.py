from __future__ import annotations

import logging

import bcrypt

from utiltrack.models.user import User
from utiltrack.repositories.base import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repo: UserRepository) -> None:
        self.repo = repo

    def register_user(self, email: str, password: str) -> User:
        email = email.strip().lower()
        if not email or not password:
            raise ValueError("Email and password are required")
        existing = self.repo.get_by_email(email)
        if existing is not None:
            raise ValueError(f"Email '{email}' is already registered")
        password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()
        result = self.repo.create(User(email=email, password_hash=password_hash))
        logger.info("User registered: %s", email)
        return result

    def get_by_id(self, user_id: int) -> User | None:
        return self.repo.get_by_id(user_id)

    def authenticate(self, email: str, password: str) -> User | None:
        user = self.repo.get_by_email(email.strip().lower())
        if user is None:
            return None
        if bcrypt.checkpw(password.encode(), user.password_hash.encode()):
            return user
        return None
