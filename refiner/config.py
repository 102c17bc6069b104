"""
Configuration management for the refine-backlog CLI.

This module centralizes loading of configuration values from environment
variables.  It defines sane defaults for the service endpoints and
provides an interface for the rest of the application to query these
settings.

Recognized variables:

* ``REFINE_BACKLOG_API_URL``  - refine endpoint.
* ``REFINE_BACKLOG_LINT_URL`` - issue scoring endpoint.
* ``REFINE_BACKLOG_KEY``      - license key used when ``--key`` is not given.
* ``GITHUB_TOKEN``            - bearer token for the GitHub issues API.
* ``GITHUB_API_URL``          - GitHub API base (GitHub Enterprise).
* ``REFINER_TIMEOUT``         - HTTP timeout in seconds.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from . import __version__


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://refinebacklog.com/api/refine"
DEFAULT_LINT_URL = "https://refinebacklog.com/api/lint"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_S = 60.0

USER_AGENT = f"refine-backlog-cli/{__version__}"


@dataclass
class RefinerConfig:
    """Top-level configuration for the refine-backlog CLI.

    Attributes
    ----------
    api_url: str
        Endpoint receiving the backlog items to refine.

    lint_url: str
        Endpoint scoring a single issue for completeness.

    license_key: str | None
        Pro/Team license key.  Sent as ``x-license-key`` only when set.

    github_token: str | None
        Token for the GitHub API.  Without it issues are fetched
        anonymously, which only works for public repositories.

    github_api_url: str
        Base URL of the GitHub REST API.

    timeout: float
        Timeout in seconds applied to every HTTP request.
    """

    api_url: str = DEFAULT_API_URL
    lint_url: str = DEFAULT_LINT_URL
    license_key: Optional[str] = None
    github_token: Optional[str] = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    timeout: float = DEFAULT_TIMEOUT_S

    @staticmethod
    def load(environ: Optional[Mapping[str, str]] = None) -> "RefinerConfig":
        """Load configuration values from the environment.

        Parameters
        ----------
        environ: Mapping[str, str] | None
            Mapping to read from.  Defaults to ``os.environ``.

        Returns
        -------
        RefinerConfig
            A populated configuration object.
        """
        env = os.environ if environ is None else environ

        timeout = DEFAULT_TIMEOUT_S
        raw_timeout = env.get("REFINER_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
                if timeout <= 0:
                    raise ValueError(raw_timeout)
            except ValueError:
                logger.warning(
                    "Ignoring invalid REFINER_TIMEOUT=%r; using %ss.", raw_timeout, DEFAULT_TIMEOUT_S
                )
                timeout = DEFAULT_TIMEOUT_S

        return RefinerConfig(
            api_url=env.get("REFINE_BACKLOG_API_URL") or DEFAULT_API_URL,
            lint_url=env.get("REFINE_BACKLOG_LINT_URL") or DEFAULT_LINT_URL,
            license_key=env.get("REFINE_BACKLOG_KEY") or None,
            github_token=env.get("GITHUB_TOKEN") or None,
            github_api_url=(env.get("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL).rstrip("/"),
            timeout=timeout,
        )
