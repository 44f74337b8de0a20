"""Lyrics read from files next to the media file."""

import logging

from lyricsresolver.lrc import is_synced, parse_lrc
from lyricsresolver.models import LyricsResult, LyricsResultList, TimedLine, Track

logger = logging.getLogger(__name__)


def read_external_file(track: Track, extension: str) -> LyricsResultList:
    """
    Read lyrics from a sibling file such as ``song.lrc`` for ``song.flac``.

    Args:
        track: The track; lookups need ``track.path``
        extension: File extension including the leading dot

    Returns:
        A one-element list, or an empty list when there is no usable file
    """
    if track.path is None:
        return []

    path = track.path.with_suffix(extension)
    if not path.is_file():
        logger.debug("No external lyrics file at %s", path)
        return []

    content = path.read_text(encoding="utf-8")
    if is_synced(content):
        lines = parse_lrc(content)
        synced = True
    else:
        lines = [TimedLine(start=None, text=line) for line in content.splitlines() if line.strip()]
        synced = False

    if not lines:
        return []

    logger.debug("Read %d lines from %s", len(lines), path)
    return [LyricsResult(
        display_artist=track.artist,
        display_title=track.title,
        synced=synced,
        lines=lines,
        source=extension,
    )]
