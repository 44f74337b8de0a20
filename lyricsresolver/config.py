"""Configuration settings for lyricsresolver.

Values are read from environment variables, falling back to the defaults
below.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from lyricsresolver.agents.base import LyricsAgent
    from lyricsresolver.agents.registry import AgentRegistry

DEFAULT_PRIORITY = ".lrc,.txt,embedded"
DEFAULT_AGENT = "lrclib"
LRCLIB_TIMEOUT = 60.0  # lrclib.net is slow
HTTP_TIMEOUT = 10.0

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class Settings:
    priority: str = DEFAULT_PRIORITY
    agent: str = DEFAULT_AGENT
    syrics_enabled: bool = False
    syrics_sp_dc: str = ""
    lrclib_timeout: float = LRCLIB_TIMEOUT
    http_timeout: float = HTTP_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.
        """
        env = os.environ if environ is None else environ
        return cls(
            priority=env.get("LYRICS_PRIORITY", DEFAULT_PRIORITY),
            agent=env.get("LYRICS_AGENT", DEFAULT_AGENT).strip().lower(),
            syrics_enabled=env.get("SYRICS_ENABLED", "").strip().lower() in _TRUE_VALUES,
            syrics_sp_dc=env.get("SYRICS_SP_DC", ""),
            lrclib_timeout=float(env.get("LRCLIB_TIMEOUT", LRCLIB_TIMEOUT)),
            http_timeout=float(env.get("HTTP_TIMEOUT", HTTP_TIMEOUT)),
        )


def build_agent(
    settings: Settings,
    registry: Optional["AgentRegistry"] = None,
) -> Optional["LyricsAgent"]:
    """
    Create the agent named by ``settings.agent``.

    Returns:
        The agent, or None if it is disabled or no agent is configured
    """
    from lyricsresolver.agents.registry import default_registry

    if not settings.agent:
        return None
    if registry is None:
        registry = default_registry()
    return registry.create(settings.agent, settings)
