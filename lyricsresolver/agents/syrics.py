"""Spotify lyrics agent.

Lyrics are fetched in three steps: a web-player access token is issued in
exchange for the ``sp_dc`` session cookie, the track is looked up through
the search API, and the lyrics are read from the color-lyrics endpoint.
The token is cached per agent until it expires.
"""

import logging
import re
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from lyricsresolver.agents.base import LyricsAgent
from lyricsresolver.config import Settings
from lyricsresolver.exceptions import ProtocolError
from lyricsresolver.models import LyricsResult, TimedLine

logger = logging.getLogger(__name__)

LINE_SYNCED = "LINE_SYNCED"
_LEADING_INT = re.compile(r"\s*(\d+)")


@dataclass(frozen=True)
class CachedToken:
    value: str
    expiry: float  # epoch seconds

    def is_valid(self, now: float) -> bool:
        return bool(self.value) and now < self.expiry


class SyricsAgent(LyricsAgent):
    """
    Fetch lyrics from Spotify using a web-player session cookie.

    Only usable when enabled in settings with a non-empty ``sp_dc`` cookie;
    ``from_settings`` returns None otherwise.
    """

    name = "syrics"
    TOKEN_URL = "https://open.spotify.com/get_access_token?reason=transport&productType=web_player"
    SEARCH_URL = "https://api.spotify.com/v1/search"
    LYRICS_URL = "https://spclient.wg.spotify.com/color-lyrics/v2/track/{track_id}"
    USER_AGENT = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/101.0.0.0 Safari/537.36"
    )

    def __init__(
        self,
        sp_dc: str,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(timeout)
        self.sp_dc = sp_dc
        self._clock = clock
        self._token: Optional[CachedToken] = None
        self._token_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["SyricsAgent"]:
        if not settings.syrics_enabled or not settings.syrics_sp_dc:
            return None
        return cls(settings.syrics_sp_dc, timeout=settings.http_timeout)

    def get_lyrics(
        self,
        artist: str,
        title: str,
        deadline: Optional[float] = None,
    ) -> Optional[LyricsResult]:
        """Fetch lyrics from Spotify."""
        logger.info("syrics: looking up lyrics for %r - %r", artist, title)

        token = self._ensure_token(deadline)

        track_id = self._search_track(token, artist, title, deadline)
        if not track_id:
            logger.info("syrics: track not found for %r - %r", artist, title)
            return None

        lyrics = self._fetch_lyrics(token, track_id, deadline)
        if lyrics is None:
            logger.info("syrics: no lyrics available for track %s", track_id)
            return None

        lyrics.display_artist = artist
        lyrics.display_title = title
        logger.info("syrics: fetched %d lines (synced=%s)", len(lyrics.lines), lyrics.synced)
        return lyrics

    def _ensure_token(self, deadline: Optional[float] = None) -> str:
        """Return a valid access token, requesting a new one if needed."""
        with self._token_lock:
            token = self._token
            if token is not None and token.is_valid(self._clock()):
                return token.value

            logger.debug("syrics: requesting token (cookie length %d)", len(self.sp_dc))
            response = self._get(
                self.TOKEN_URL,
                headers={
                    "Cookie": f"sp_dc={self.sp_dc}",
                    "User-Agent": self.USER_AGENT,
                },
                deadline=deadline
            )
            if response.status_code != 200:
                raise ProtocolError(
                    f"syrics: failed to get token: {response.status_code} {response.reason}"
                )

            try:
                data = response.json()
                token = CachedToken(
                    value=data["accessToken"],
                    expiry=data["accessTokenExpirationTimestampMs"] / 1000,
                )
            except (ValueError, KeyError, TypeError) as exc:
                raise ProtocolError(f"syrics: malformed token response: {exc}") from exc

            self._token = token
            logger.debug("syrics: token acquired, expires at %s", token.expiry)
            return token.value

    def _search_track(
        self,
        token: str,
        artist: str,
        title: str,
        deadline: Optional[float] = None,
    ) -> Optional[str]:
        """Search for a track and return its Spotify ID."""
        response = self._get(
            self.SEARCH_URL,
            params={
                "q": f"track:{title} artist:{artist}",
                "type": "track",
                "limit": 1
            },
            headers={"Authorization": f"Bearer {token}"},
            deadline=deadline
        )
        if response.status_code != 200:
            raise ProtocolError(
                f"syrics: failed to search track: {response.status_code} {response.reason}"
            )

        try:
            items = response.json()["tracks"]["items"]
            if not items:
                return None
            return items[0]["id"]
        except (ValueError, KeyError, TypeError, IndexError) as exc:
            raise ProtocolError(f"syrics: malformed search response: {exc}") from exc

    def _fetch_lyrics(
        self,
        token: str,
        track_id: str,
        deadline: Optional[float] = None,
    ) -> Optional[LyricsResult]:
        """Get lyrics by track ID."""
        response = self._get(
            self.LYRICS_URL.format(track_id=track_id),
            headers={
                "Authorization": f"Bearer {token}",
                "App-Platform": "WebPlayer",
            },
            deadline=deadline
        )
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise ProtocolError(
                f"syrics: failed to fetch lyrics: {response.status_code} {response.reason}"
            )

        try:
            data = response.json()["lyrics"]
            sync_type = data.get("syncType")
            entries = data.get("lines") or []
            lines = [
                TimedLine(start=_parse_start(entry.get("startTimeMs")), text=entry.get("words") or "")
                for entry in entries
            ]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ProtocolError(f"syrics: malformed lyrics response: {exc}") from exc

        logger.debug("syrics: track %s has %d lines (%s)", track_id, len(lines), sync_type)
        return LyricsResult(
            display_artist="",
            display_title="",
            synced=sync_type == LINE_SYNCED,
            lines=lines,
            source=self.name,
        )


def _parse_start(value) -> int:
    # Leading integer, as in "1000ms"; anything else starts at zero so one
    # bad timestamp does not discard the other lines
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    match = _LEADING_INT.match(value) if isinstance(value, str) else None
    if match is None:
        return 0
    return int(match.group(1))
