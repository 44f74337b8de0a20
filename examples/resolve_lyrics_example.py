"""
Example usage of lyricsresolver.
"""

import logging
import time
from pathlib import Path

from lyricsresolver import LyricsResolver, Settings, Track, get_lyrics
from lyricsresolver.agents import LrcLibAgent

logging.basicConfig(level=logging.INFO)

# Example 1: Resolve with settings from the environment
print("=== Resolve using LYRICS_PRIORITY / LYRICS_AGENT ===")
settings = Settings.from_env()
settings.priority = "agent"
lyrics = get_lyrics(Track("Queen", "Bohemian Rhapsody"), settings=settings)
if lyrics:
    print(f"Found lyrics from: {lyrics[0].source}")
    print(f"Synced: {lyrics[0].synced}")
    print("\nFirst 5 lines:")
    for line in lyrics[0].lines[:5]:
        print(f"  {line.start} {line.text}")
else:
    print("No lyrics found")

# Example 2: Sidecar file first, then lrclib, giving up after 30 seconds
print("\n=== Sidecar file, then lrclib ===")
resolver = LyricsResolver(agent=LrcLibAgent())
track = Track("The Weeknd", "Blinding Lights", Path("music/blinding_lights.flac"))
lyrics = resolver.resolve(track, ".lrc,.txt,agent", deadline=time.monotonic() + 30)
if lyrics:
    print(lyrics[0].to_lrc()[:200])
