"""Resolve lyrics for a track from an ordered list of sources."""

import logging

from lyricsresolver.models import TimedLine, LyricsResult, LyricsResultList, Track
from lyricsresolver.lrc import parse_lrc
from lyricsresolver.config import Settings, build_agent
from lyricsresolver.resolver import LyricsResolver, get_lyrics
from lyricsresolver.exceptions import (
    LyricsError,
    TransportError,
    ProtocolError,
    InvalidConfiguration,
    LyricsCancelled,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "TimedLine",
    "LyricsResult",
    "LyricsResultList",
    "Track",
    "parse_lrc",
    "Settings",
    "build_agent",
    "LyricsResolver",
    "get_lyrics",
    "LyricsError",
    "TransportError",
    "ProtocolError",
    "InvalidConfiguration",
    "LyricsCancelled",
]
