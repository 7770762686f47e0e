"""Credential-based sign-in for the tutor UI."""

from src.auth.service import authenticate, display_name, user_id_for

__all__ = ["authenticate", "display_name", "user_id_for"]
