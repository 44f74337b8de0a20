"""LrcLib.net lyrics agent - free, no authentication required."""

import logging
from typing import Optional

from lyricsresolver.agents.base import LyricsAgent
from lyricsresolver.config import LRCLIB_TIMEOUT, Settings
from lyricsresolver.exceptions import ProtocolError
from lyricsresolver.lrc import parse_lrc
from lyricsresolver.models import LyricsResult, TimedLine

logger = logging.getLogger(__name__)


class LrcLibAgent(LyricsAgent):
    """
    Fetch lyrics from lrclib.net

    Searches by artist and track name and uses the first match only.
    """

    name = "lrclib"
    BASE_URL = "https://lrclib.net/api"
    TIMEOUT = LRCLIB_TIMEOUT

    def __init__(self, timeout: Optional[float] = None):
        super().__init__(timeout)
        from lyricsresolver import __version__

        self.session.headers.update({
            "User-Agent": f"lyricsresolver/{__version__}"
        })

    @classmethod
    def from_settings(cls, settings: Settings) -> "LrcLibAgent":
        return cls(timeout=settings.lrclib_timeout)

    def get_lyrics(
        self,
        artist: str,
        title: str,
        deadline: Optional[float] = None,
    ) -> Optional[LyricsResult]:
        """Fetch lyrics from LrcLib."""
        logger.info("lrclib: looking up lyrics for %r - %r", artist, title)
        response = self._get(
            f"{self.BASE_URL}/search",
            params={
                "artist_name": artist,
                "track_name": title
            },
            deadline=deadline
        )

        if response.status_code == 404:
            logger.info("lrclib: no lyrics found for %r - %r", artist, title)
            return None
        if response.status_code != 200:
            raise ProtocolError(
                f"lrclib: unexpected status: {response.status_code} {response.reason}"
            )

        try:
            results = response.json()
        except ValueError as exc:
            raise ProtocolError(f"lrclib: failed to decode response: {exc}") from exc
        if not isinstance(results, list):
            raise ProtocolError("lrclib: expected a list of search results")

        if not results:
            logger.info("lrclib: no results for %r - %r", artist, title)
            return None

        result = results[0]
        if not isinstance(result, dict):
            raise ProtocolError("lrclib: malformed search result")
        synced_lyrics = result.get("syncedLyrics") or ""
        plain_lyrics = result.get("plainLyrics") or ""
        logger.info(
            "lrclib: matched %r - %r (synced=%s)",
            result.get("artistName"), result.get("trackName"), bool(synced_lyrics)
        )

        if result.get("instrumental"):
            logger.info("lrclib: track is instrumental")
            return None

        lyrics = LyricsResult(
            display_artist=result.get("artistName") or "",
            display_title=result.get("trackName") or "",
            source=self.name,
        )

        # Prefer synced lyrics, fall back to plain
        lines = parse_lrc(synced_lyrics) if synced_lyrics else []
        if lines:
            lyrics.lines = lines
            lyrics.synced = True
        elif plain_lyrics:
            if synced_lyrics:
                logger.warning("lrclib: synced lyrics unparsable, using plain lyrics")
            lyrics.lines = [TimedLine(start=None, text=plain_lyrics)]
        else:
            logger.info("lrclib: no usable lyrics content")
            return None

        logger.info("lrclib: fetched %d lines (synced=%s)", len(lyrics.lines), lyrics.synced)
        return lyrics
