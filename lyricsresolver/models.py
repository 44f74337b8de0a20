"""Data structures shared by the decoder, the agents and the resolver."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class TimedLine:
    """A single lyric line. ``start`` is None for unsynced lyrics."""
    start: Optional[int]  # milliseconds into the track
    text: str


@dataclass
class LyricsResult:
    """Lyrics returned by a single source for a single lookup."""
    display_artist: str
    display_title: str
    synced: bool = False
    lines: List[TimedLine] = field(default_factory=list)
    source: str = ""

    def to_plain_text(self) -> str:
        """Return lyrics as plain text without timestamps."""
        return "\n".join(line.text for line in self.lines if line.text)

    def to_lrc(self) -> str:
        """Render the lines in LRC format. Untimed lines are written bare."""
        from lyricsresolver.lrc import format_timestamp

        out = []
        for line in self.lines:
            if line.start is None:
                out.append(line.text)
            else:
                out.append(f"{format_timestamp(line.start)}{line.text}")
        return "\n".join(out)

    def get_line_at(self, milliseconds: int) -> Optional[TimedLine]:
        """Get the lyric line at a specific timestamp."""
        current_line = None
        for line in self.lines:
            if line.start is None:
                continue
            if line.start <= milliseconds:
                current_line = line
            else:
                break
        return current_line


LyricsResultList = List[LyricsResult]


@dataclass(frozen=True)
class Track:
    """What the resolver looks lyrics up for."""
    artist: str
    title: str
    path: Optional[Path] = None
