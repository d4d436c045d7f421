"""
Runtime settings, built once at startup and passed down explicitly.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from .client import DEFAULT_ADDRESS


TOKEN_ENV = "TFE_TOKEN"
ADDRESS_ENV = "TFE_ADDRESS"


class ConfigError(Exception):
    """Raised when required settings are missing."""
    pass


class Settings(BaseModel):
    organization: str
    search: str = ""
    noop: bool = False
    debug: bool = False
    token: str = Field(repr=False)
    address: str = DEFAULT_ADDRESS

    class Config:
        frozen = True

    @classmethod
    def from_env(
        cls,
        organization: str,
        search: str = "",
        noop: bool = False,
        debug: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ) -> Settings:
        """
        Combine command-line values with the token and address from the
        environment.

        Raises:
            ConfigError: if the organization or the token is missing.
        """
        if environ is None:
            environ = os.environ

        if not organization:
            raise ConfigError("Organization name is required")

        token = environ.get(TOKEN_ENV)
        if not token:
            raise ConfigError(f"Environment variable {TOKEN_ENV} not found")

        return cls(
            organization=organization,
            search=search or "",
            noop=noop,
            debug=debug,
            token=token,
            address=environ.get(ADDRESS_ENV) or DEFAULT_ADDRESS,
        )
