"""Runtime settings for the inheritance extension."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from core.env import env_bool, env_str

DEFAULT_DISCRIMINATOR = "type"


@dataclass(frozen=True, slots=True)
class InheritanceSettings:
    """Process-wide switches read once from the environment."""

    discriminator: str = DEFAULT_DISCRIMINATOR
    type_checks: bool = True
    validate_on_flush: bool = True


@lru_cache(maxsize=1)
def get_settings() -> InheritanceSettings:
    return InheritanceSettings(
        discriminator=env_str("INHERITS_FROM_DISCRIMINATOR", DEFAULT_DISCRIMINATOR) or DEFAULT_DISCRIMINATOR,
        type_checks=env_bool("INHERITS_FROM_TYPE_CHECKS", True),
        validate_on_flush=env_bool("INHERITS_FROM_VALIDATE_ON_FLUSH", True),
    )


__all__ = ["DEFAULT_DISCRIMINATOR", "InheritanceSettings", "get_settings"]
