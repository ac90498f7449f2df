"""Transport configuration for loading constraints."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from constraintforge.errors import ConstraintConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ConstraintConfig:
    """Where and how to fetch the constraints document.

    Attributes:
        constraints_url: URL which serves the constraints over a GET request
        needs_authentication: Send credentials along with the request
        credentials: Anything httpx accepts as ``auth`` (tuple, httpx.Auth)
        timeout: Request timeout in seconds
    """

    constraints_url: str
    needs_authentication: bool = False
    credentials: Any = None
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> ConstraintConfig:
        """Create config from environment variables.

        Reads:
        1. CONSTRAINTFORGE_CONSTRAINTS_URL (required)
        2. CONSTRAINTFORGE_NEEDS_AUTHENTICATION (1/true/yes/on)
        3. CONSTRAINTFORGE_TIMEOUT (seconds, default 10)

        Raises:
            ConstraintConfigurationError: If the URL is not set or the
                timeout is not a number.
        """
        url = os.environ.get("CONSTRAINTFORGE_CONSTRAINTS_URL")
        if not url:
            raise ConstraintConfigurationError(
                "CONSTRAINTFORGE_CONSTRAINTS_URL is not set."
            )

        needs_authentication = (
            os.environ.get("CONSTRAINTFORGE_NEEDS_AUTHENTICATION", "").strip().lower()
            in _TRUTHY
        )

        raw_timeout = os.environ.get("CONSTRAINTFORGE_TIMEOUT", "10")
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConstraintConfigurationError(
                f"CONSTRAINTFORGE_TIMEOUT must be a number, got {raw_timeout!r}."
            ) from None

        return cls(
            constraints_url=url,
            needs_authentication=needs_authentication,
            timeout=timeout,
        )
