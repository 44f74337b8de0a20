"""Exceptions raised by lyrics sources and the resolver."""


class LyricsError(Exception):
    """Base exception for lyricsresolver."""
    pass


class TransportError(LyricsError):
    """Network or connection failure while talking to a lyrics service."""
    pass


class ProtocolError(LyricsError):
    """Unexpected HTTP status or a response body that could not be decoded."""
    pass


class InvalidConfiguration(LyricsError):
    """Unknown priority token or agent name."""
    pass


class LyricsCancelled(LyricsError):
    """The caller's deadline passed before the request completed."""
    pass
