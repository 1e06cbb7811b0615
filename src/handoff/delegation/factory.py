"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Build coordinator configuration from `HANDOFF_DELEGATION_*` variables.
"""

from __future__ import annotations

from ..config import env_bool, env_float, env_int
from ..errors import ConfigurationError
from .types import CoordinatorConfig


def coordinator_config_from_env() -> CoordinatorConfig:
    """
    Create a ``CoordinatorConfig`` from the environment.

    Variables:
    - `HANDOFF_DELEGATION_TIMEOUT_S` (default 300)
    - `HANDOFF_DELEGATION_HISTORY_TTL_S` (default 600)
    - `HANDOFF_DELEGATION_HISTORY_MAX` (default 1000)
    - `HANDOFF_DELEGATION_KEY_INCLUDES_TASK` (default false)
    """
    defaults = CoordinatorConfig()
    try:
        return CoordinatorConfig(
            timeout_s=env_float("HANDOFF_DELEGATION_TIMEOUT_S", defaults.timeout_s),
            history_ttl_s=env_float(
                "HANDOFF_DELEGATION_HISTORY_TTL_S", defaults.history_ttl_s
            ),
            history_max_entries=env_int(
                "HANDOFF_DELEGATION_HISTORY_MAX", defaults.history_max_entries
            ),
            key_includes_task=env_bool(
                "HANDOFF_DELEGATION_KEY_INCLUDES_TASK", defaults.key_includes_task
            ),
        )
    except ConfigurationError:
        raise
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
