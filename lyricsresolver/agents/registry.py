"""Name-keyed registry of agent factories."""

from typing import Callable, Dict, List, Optional

from lyricsresolver.agents.base import LyricsAgent
from lyricsresolver.config import Settings
from lyricsresolver.exceptions import InvalidConfiguration

# Returns None when the agent is disabled or unconfigured
AgentFactory = Callable[[Settings], Optional[LyricsAgent]]


class AgentRegistry:
    """
    Mapping from agent name to the factory that builds it.

    Build one at startup and pass it to whatever needs to select an agent.
    Entries are never removed.
    """

    def __init__(self):
        self._factories: Dict[str, AgentFactory] = {}

    def register(self, name: str, factory: AgentFactory) -> None:
        if name in self._factories:
            raise ValueError(f"agent {name!r} is already registered")
        self._factories[name] = factory

    def get(self, name: str) -> Optional[AgentFactory]:
        return self._factories.get(name)

    def create(self, name: str, settings: Settings) -> Optional[LyricsAgent]:
        """
        Build the named agent.

        Returns:
            The agent, or None if its factory reports it as disabled

        Raises:
            InvalidConfiguration: if no agent is registered under ``name``
        """
        factory = self.get(name)
        if factory is None:
            raise InvalidConfiguration(f"unknown lyrics agent: {name!r}")
        return factory(settings)

    def names(self) -> List[str]:
        return list(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories


def default_registry() -> AgentRegistry:
    """Return a registry with the built-in agents."""
    from lyricsresolver.agents.lrclib import LrcLibAgent
    from lyricsresolver.agents.syrics import SyricsAgent

    registry = AgentRegistry()
    registry.register(LrcLibAgent.name, LrcLibAgent.from_settings)
    registry.register(SyricsAgent.name, SyricsAgent.from_settings)
    return registry
