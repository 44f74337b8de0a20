"""Base class for lyrics agents."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

import requests

from lyricsresolver.exceptions import LyricsCancelled, TransportError
from lyricsresolver.models import LyricsResult

logger = logging.getLogger(__name__)


class LyricsAgent(ABC):
    """
    Abstract base class for external lyrics sources.

    ``get_lyrics`` returns None when the service has nothing for the query
    and raises a ``LyricsError`` subclass when the lookup itself failed.
    """

    name: str = "base"
    TIMEOUT: float = 10

    def __init__(self, timeout: Optional[float] = None):
        if timeout is not None:
            self.TIMEOUT = timeout
        self.session = requests.Session()

    def agent_name(self) -> str:
        return self.name

    @abstractmethod
    def get_lyrics(
        self,
        artist: str,
        title: str,
        deadline: Optional[float] = None,
    ) -> Optional[LyricsResult]:
        """
        Fetch lyrics for a given artist and title.

        Args:
            artist: The artist name
            title: The song title
            deadline: Optional ``time.monotonic()`` value after which
                      in-flight requests are abandoned

        Returns:
            LyricsResult or None if not found
        """
        pass

    def _timeout(self, deadline: Optional[float]) -> float:
        if deadline is None:
            return self.TIMEOUT
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise LyricsCancelled(f"{self.name}: deadline exceeded")
        return min(self.TIMEOUT, remaining)

    def _get(self, url: str, deadline: Optional[float] = None, **kwargs) -> requests.Response:
        """GET ``url`` with the agent's session, mapping failures to LyricsError."""
        timeout = self._timeout(deadline)
        logger.debug("%s: GET %s", self.name, url)
        try:
            response = self.session.get(url, timeout=timeout, **kwargs)
        except requests.Timeout as exc:
            if deadline is not None and time.monotonic() >= deadline:
                raise LyricsCancelled(f"{self.name}: deadline exceeded") from exc
            raise TransportError(f"{self.name}: request timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"{self.name}: request failed: {exc}") from exc

        # requests only bounds each connect and read, not the whole transfer
        if deadline is not None and time.monotonic() >= deadline:
            raise LyricsCancelled(f"{self.name}: deadline exceeded")
        return response
