"""
Credential providers.

The generation client never caches a key: it asks the provider on every call,
so a key rotated mid-session is picked up by the next request.
"""

import inspect
import os
from abc import ABC, abstractmethod
from typing import Optional

from dotenv import load_dotenv

from utils.constants import API_KEY_ENV
from utils.logger import get_logger
logger = get_logger("credentials")


class CredentialProvider(ABC):
    """Host-specific key source. Swap implementations without touching the client."""

    @abstractmethod
    def is_ready(self) -> bool:
        """True when a key is currently selected."""
        ...

    @abstractmethod
    def request_selection(self):
        """Ask the host/user to (re)select a key. May be sync or async."""
        ...

    @abstractmethod
    def get_api_key(self) -> Optional[str]:
        ...


class EnvCredentialProvider(CredentialProvider):
    """Reads the key from the environment at call time."""

    def __init__(self, env_var: str = API_KEY_ENV, dotenv_path: Optional[str] = None):
        self.env_var = env_var
        self.dotenv_path = dotenv_path

    def is_ready(self) -> bool:
        return bool(os.getenv(self.env_var))

    def request_selection(self):
        # re-read .env so an edited key file is honored without restart
        load_dotenv(self.dotenv_path, override=True)
        if self.is_ready():
            logger.info(f"[Credentials] {self.env_var} reloaded")
        else:
            logger.warning(f"[Credentials] {self.env_var} is not set. Add it to .env or the environment.")

    def get_api_key(self) -> Optional[str]:
        return os.getenv(self.env_var)


class StaticCredentialProvider(CredentialProvider):
    """Programmatic key holder; `rotate` swaps the key for subsequent calls."""

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key
        self.selection_requests = 0

    def is_ready(self) -> bool:
        return bool(self._api_key)

    def request_selection(self):
        self.selection_requests += 1

    def rotate(self, api_key: str):
        self._api_key = api_key

    def get_api_key(self) -> Optional[str]:
        return self._api_key


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


async def request_selection(provider: Optional[CredentialProvider]):
    """Fire the provider's re-selection prompt, if there is a provider."""
    if provider is None:
        return
    await _maybe_await(provider.request_selection())


async def ensure_credential(provider: Optional[CredentialProvider]) -> bool:
    """
    Gate before a generation run.

    - no provider: assume ready
    - not ready: prompt for selection, then proceed
    - provider itself failing: False
    """
    if provider is None:
        return True
    try:
        ready = await _maybe_await(provider.is_ready())
        if not ready:
            await request_selection(provider)
        return True
    except Exception as e:
        logger.error(f"[Credentials] Key selection error: {e}")
        return False
