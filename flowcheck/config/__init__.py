"""Configuration for flowcheck.

Key Components:
    - FlowcheckSettings: Main configuration container with YAML loading support
    - RepositoryConfig: Repository exercised by live scenarios
    - GhConfig: gh executable and timeout
    - PollingConfig: Timeouts and intervals for run polling

Example:
    >>> from flowcheck.config import load_settings
    >>> settings = load_settings()
    >>> settings.repository.slug
    'david-iaggbs/sandbox-swe-dparra--solution-architect'
"""

from flowcheck.config.settings import (
    FlowcheckSettings,
    GhConfig,
    PollingConfig,
    RepositoryConfig,
    load_settings,
)

__all__ = ["FlowcheckSettings", "GhConfig", "PollingConfig", "RepositoryConfig", "load_settings"]
