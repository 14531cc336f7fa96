"""
Identity boundary.

Authentication itself is Supabase Auth's job. This module only carries the
result (who the user is, or that this is a guest session) and exposes the
sign-out action the session needs.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import structlog
from pydantic import BaseModel

from hometrack.services.storage import SupabaseClient


logger = structlog.get_logger(__name__)


class Identity(BaseModel):
    """Who the current session belongs to."""

    user_id: Optional[str] = None
    email: Optional[str] = None
    access_token: Optional[str] = None
    is_guest: bool = False

    @classmethod
    def guest(cls) -> "Identity":
        return cls(is_guest=True)

    @property
    def is_authenticated(self) -> bool:
        return not self.is_guest and self.user_id is not None


class AuthenticationError(Exception):
    """Sign-in or sign-up was rejected by the identity provider."""
    pass


class IdentityProvider(ABC):
    """Supplies the session identity and the sign-out action."""

    @abstractmethod
    def current(self) -> Optional[Identity]:
        """The signed-in identity, or None if nobody is signed in."""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass


class GuestIdentityProvider(IdentityProvider):
    """Demo sessions: always a guest, sign-out just forgets it."""

    def __init__(self):
        self._identity: Optional[Identity] = Identity.guest()

    def current(self) -> Optional[Identity]:
        return self._identity

    async def sign_out(self) -> None:
        self._identity = None


class SupabaseIdentityProvider(IdentityProvider):
    """Email/password accounts through Supabase Auth."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or SupabaseClient()
        self._identity: Optional[Identity] = None

    def current(self) -> Optional[Identity]:
        return self._identity

    def _identity_from(self, response) -> Identity:
        if response.user is None:
            raise AuthenticationError("No user returned by Supabase Auth")
        token = response.session.access_token if response.session else None
        identity = Identity(
            user_id=response.user.id,
            email=response.user.email,
            access_token=token,
        )
        self._client.set_access_token(token)
        self._identity = identity
        return identity

    async def sign_in(self, email: str, password: str) -> Identity:
        auth = self._client.connect().auth
        try:
            response = await asyncio.to_thread(
                auth.sign_in_with_password,
                {"email": email, "password": password},
            )
        except Exception as e:
            logger.warning("sign_in_failed", email=email, error=str(e))
            raise AuthenticationError(str(e))
        return self._identity_from(response)

    async def sign_up(self, email: str, password: str) -> Identity:
        auth = self._client.connect().auth
        try:
            response = await asyncio.to_thread(
                auth.sign_up,
                {"email": email, "password": password},
            )
        except Exception as e:
            logger.warning("sign_up_failed", email=email, error=str(e))
            raise AuthenticationError(str(e))
        return self._identity_from(response)

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(self._client.connect().auth.sign_out)
        except Exception as e:
            logger.warning("sign_out_failed", error=str(e))
        finally:
            self._client.set_access_token(None)
            self._identity = None
