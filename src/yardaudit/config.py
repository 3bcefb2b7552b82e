"""Client configuration for yardaudit."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from yardaudit._constants import (
    DEFAULT_GEMINI_MODEL,
    LOCATION_BASE_URL,
    SIMULATED_DELAY_SECONDS,
)
from yardaudit.exceptions import AuditConfigError


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise AuditConfigError(f"{key} must be a number, got {value!r}") from exc


def _env_int(env: Mapping[str, str], key: str) -> int | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise AuditConfigError(f"{key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class AuditConfig:
    """Client configuration.

    Parameters
    ----------
    location_token : str or None
        Bearer token for the fleet-location API.  ``None``, an empty
        string or ``"demo"`` select the location simulator.
    location_base_url : str
        Fleet-location API base URL.
    gemini_api_key : str or None
        API key for the generative AI service.  Without it the AI
        features report themselves as unavailable instead of failing.
    gemini_model : str
        Model name used for document extraction and report generation.
    simulation_delay : float
        Seconds the simulated location provider waits before answering.
    simulation_seed : int or None
        Seed for the simulator's random source.  ``None`` gives a
        different placement on every sync.
    """

    location_token: str | None = None
    location_base_url: str = LOCATION_BASE_URL
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    simulation_delay: float = SIMULATED_DELAY_SECONDS
    simulation_seed: int | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> AuditConfig:
        """Create configuration from environment variables.

        Reads ``YARDAUDIT_LOCATION_TOKEN`` (falling back to
        ``SAMSARA_API_TOKEN``), ``YARDAUDIT_LOCATION_BASE_URL``,
        ``GEMINI_API_KEY``, ``YARDAUDIT_GEMINI_MODEL``,
        ``YARDAUDIT_SIMULATION_DELAY`` and ``YARDAUDIT_SIMULATION_SEED``.
        Explicit keyword arguments override environment values.

        Raises
        ------
        AuditConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        token = env.get("YARDAUDIT_LOCATION_TOKEN") or env.get("SAMSARA_API_TOKEN")
        if token:
            config_kwargs["location_token"] = token

        _ENV_CONFIG_MAP = {
            "YARDAUDIT_LOCATION_BASE_URL": "location_base_url",
            "GEMINI_API_KEY": "gemini_api_key",
            "YARDAUDIT_GEMINI_MODEL": "gemini_model",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        if "simulation_delay" not in overrides:
            delay = _env_float(env, "YARDAUDIT_SIMULATION_DELAY")
            if delay is not None:
                config_kwargs["simulation_delay"] = delay

        if "simulation_seed" not in overrides:
            seed = _env_int(env, "YARDAUDIT_SIMULATION_SEED")
            if seed is not None:
                config_kwargs["simulation_seed"] = seed

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
