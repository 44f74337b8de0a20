"""Resolve lyrics by trying each configured source in priority order."""

import logging
from typing import Callable, Iterable, List, Optional, Union

from lyricsresolver.agents.base import LyricsAgent
from lyricsresolver.config import Settings, build_agent
from lyricsresolver.exceptions import InvalidConfiguration
from lyricsresolver.models import LyricsResultList, Track
from lyricsresolver.sources import read_external_file

logger = logging.getLogger(__name__)

EmbeddedReader = Callable[[Track], LyricsResultList]
ExternalFileReader = Callable[[Track, str], LyricsResultList]


def parse_priority(priority: Union[str, Iterable[str]]) -> List[str]:
    """Split a comma-separated priority list into normalized tokens."""
    if isinstance(priority, str):
        priority = priority.split(",")
    return [token.strip().lower() for token in priority]


class LyricsResolver:
    """
    Look up lyrics from an ordered list of sources.

    Recognised tokens:
        ``embedded``  lyrics stored in the media file's tags
        ``.<ext>``    a sibling file with that extension, e.g. ``.lrc``
        ``agent``     the single external agent given to the resolver

    The first source that yields lyrics wins; later sources are not tried.
    """

    def __init__(
        self,
        agent: Optional[LyricsAgent] = None,
        embedded: Optional[EmbeddedReader] = None,
        external_file: ExternalFileReader = read_external_file,
    ):
        self.agent = agent
        self.embedded = embedded
        self.external_file = external_file

    def resolve(
        self,
        track: Track,
        priority: Union[str, Iterable[str]],
        deadline: Optional[float] = None,
    ) -> LyricsResultList:
        """
        Resolve lyrics for a track.

        Args:
            track: Track to look up
            priority: Comma-separated string or sequence of source tokens
            deadline: Optional ``time.monotonic()`` value passed on to the agent

        Returns:
            Results from the first source that produced any, or an empty list
        """
        tokens = parse_priority(priority)
        logger.info("Resolving lyrics for %r - %r (priority: %s)", track.artist, track.title, tokens)

        for token in tokens:
            logger.debug("Trying lyrics source %r", token)
            try:
                lyrics = self._from_source(token, track, deadline)
            except Exception as exc:
                logger.error("Error getting lyrics from source %r: %s", token, exc)
                continue

            if lyrics:
                logger.info("Lyrics found using source %r", token)
                return lyrics

        logger.info("No lyrics found for %r - %r", track.artist, track.title)
        return []

    def _from_source(self, token: str, track: Track, deadline: Optional[float]) -> LyricsResultList:
        if token == "embedded":
            if self.embedded is None:
                return []
            return self.embedded(track)
        if token.startswith("."):
            return self.external_file(track, token)
        if token == "agent":
            return self._from_agent(track, deadline)
        raise InvalidConfiguration(f"invalid lyrics pattern: {token!r}")

    def _from_agent(self, track: Track, deadline: Optional[float]) -> LyricsResultList:
        if self.agent is None:
            logger.debug("No agent configured for agent lyrics")
            return []
        lyrics = self.agent.get_lyrics(track.artist, track.title, deadline=deadline)
        if lyrics is None:
            return []
        return [lyrics]


def get_lyrics(
    track: Track,
    settings: Optional[Settings] = None,
    agent: Optional[LyricsAgent] = None,
    embedded: Optional[EmbeddedReader] = None,
    deadline: Optional[float] = None,
) -> LyricsResultList:
    """
    Resolve lyrics using the configured priority and agent.

    Args:
        track: Track to look up
        settings: Settings to use. Defaults to ``Settings.from_env()``.
        agent: Agent to use instead of the one named in settings
        embedded: Reader for lyrics embedded in the media file
        deadline: Optional ``time.monotonic()`` deadline

    Example:
        lyrics = get_lyrics(Track("Queen", "Bohemian Rhapsody"))
    """
    if settings is None:
        settings = Settings.from_env()
    if agent is None:
        agent = build_agent(settings)
    resolver = LyricsResolver(agent=agent, embedded=embedded)
    return resolver.resolve(track, settings.priority, deadline=deadline)
