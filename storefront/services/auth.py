"""Mocked sign-in. Presence checks only; no passwords are stored or verified."""

from storefront.models.schemas import User

DEFAULT_USER_NAME = "Jane Doe"
MIN_PASSWORD_LENGTH = 6


class AuthError(Exception):
    pass


def sign_in(email: str, password: str, name: str | None = None) -> User:
    if not email or not password:
        raise AuthError("Email and password are required")
    return User(name=name or DEFAULT_USER_NAME, email=email)


def register(name: str, email: str, password: str) -> User:
    if not name or not email or not password:
        raise AuthError("Name, email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return User(name=name, email=email)
