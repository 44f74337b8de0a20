"""Lyrics agents for fetching lyrics from external services."""

from lyricsresolver.agents.base import LyricsAgent
from lyricsresolver.agents.registry import AgentRegistry, AgentFactory, default_registry
from lyricsresolver.agents.lrclib import LrcLibAgent
from lyricsresolver.agents.syrics import SyricsAgent

__all__ = [
    "LyricsAgent",
    "AgentRegistry",
    "AgentFactory",
    "default_registry",
    "LrcLibAgent",
    "SyricsAgent",
]
