"""Decoder for LRC (``[mm:ss.cc]text``) lyrics."""

import re
from typing import List, Optional, Tuple

from lyricsresolver.models import TimedLine

# A colon in the third column is treated as a metadata tag
_METADATA_COLON_POS = 2
_MIN_LINE_LEN = 10
_BRACKET_SCAN_LIMIT = 15

_FULL_TIMESTAMP = re.compile(r'\s*(\d+):\s*(\d+)\.\s*(\d+)')
_SHORT_TIMESTAMP = re.compile(r'\s*(\d+):\s*(\d+)')
_HAS_TIMESTAMP = re.compile(r'\[\d{2}:\d{2}')


def parse_lrc(lrc: str) -> List[TimedLine]:
    """
    Parse LRC text into timed lines.

    Lines that are not timestamped lyrics (metadata, garbage, unparsable
    timestamps) are dropped. This never raises; malformed input just
    yields fewer lines, possibly none.

    Args:
        lrc: Raw LRC content

    Returns:
        The parsed lines, in input order
    """
    lines = []
    for line in lrc.split("\n"):
        # Positions and lengths are measured in UTF-8 bytes
        raw = line.encode("utf-8", errors="surrogatepass")
        if not raw:
            continue

        if len(raw) > 3 and raw[:1] == b"[" and raw[_METADATA_COLON_POS:_METADATA_COLON_POS + 1] == b":":
            continue

        if len(raw) < _MIN_LINE_LEN or raw[:1] != b"[":
            continue

        end_bracket = raw.find(b"]", 1, min(len(raw), _BRACKET_SCAN_LIMIT))
        if end_bracket == -1:
            continue

        parsed = _parse_timestamp(raw[1:end_bracket].decode("utf-8", errors="surrogatepass"))
        if parsed is None:
            continue

        minutes, seconds, centiseconds = parsed
        start = (minutes * 60 + seconds) * 1000 + centiseconds * 10
        text = raw[end_bracket + 1:].decode("utf-8", errors="surrogatepass")
        lines.append(TimedLine(start=start, text=text))

    return lines


def _parse_timestamp(timestamp: str) -> Optional[Tuple[int, int, int]]:
    match = _FULL_TIMESTAMP.match(timestamp)
    if match:
        minutes, seconds, centiseconds = match.groups()
        return int(minutes), int(seconds), int(centiseconds)

    match = _SHORT_TIMESTAMP.match(timestamp)
    if match:
        minutes, seconds = match.groups()
        return int(minutes), int(seconds), 0

    return None


def is_synced(lrc: str) -> bool:
    """Check if lyrics contain timestamps."""
    return bool(_HAS_TIMESTAMP.search(lrc))


def format_timestamp(milliseconds: int) -> str:
    """Format milliseconds as an ``[mm:ss.cc]`` tag."""
    minutes, rest = divmod(milliseconds, 60000)
    seconds, ms = divmod(rest, 1000)
    return f"[{minutes:02d}:{seconds:02d}.{ms // 10:02d}]"
