"""Credential gate consulted before any generation request."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

API_KEY_ENV_VAR = "GEMINI_API_KEY"


@runtime_checkable
class CredentialGate(Protocol):
    """Owned by the host environment; the pipeline only asks and prompts."""

    async def has_selected_api_key(self) -> bool: ...

    async def open_selector(self) -> None: ...


class EnvironmentCredentialGate:
    """Treat a non-empty ``GEMINI_API_KEY`` as a selected credential."""

    def __init__(self, dotenv_path: Optional[Path] = None, env_var: str = API_KEY_ENV_VAR) -> None:
        self.dotenv_path = dotenv_path
        self.env_var = env_var
        load_dotenv(self.dotenv_path)

    async def has_selected_api_key(self) -> bool:
        return bool(os.getenv(self.env_var, "").strip())

    async def open_selector(self) -> None:
        # There is no picker outside a hosted shell; re-read .env so a key
        # added since start-up is picked up.
        load_dotenv(self.dotenv_path, override=True)
        LOGGER.info("Reloaded credentials from environment (%s)", self.env_var)
