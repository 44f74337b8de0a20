"""Tests for the Spotify lyrics agent."""

import threading
import time
from unittest.mock import Mock

import pytest

from lyricsresolver.agents import LyricsAgent, SyricsAgent
from lyricsresolver.config import Settings
from lyricsresolver.exceptions import LyricsCancelled, ProtocolError
from lyricsresolver.models import TimedLine

NOW = 1_700_000_000.0


def _token(expiry_s=NOW + 3600):
    return {"accessToken": "tok", "accessTokenExpirationTimestampMs": int(expiry_s * 1000)}


def _search(track_id="abc123"):
    items = [{"id": track_id}] if track_id else []
    return {"tracks": {"items": items}}


def _lyrics(sync_type="LINE_SYNCED", lines=None):
    if lines is None:
        lines = [
            {"startTimeMs": "1000", "words": "First"},
            {"startTimeMs": "2500", "words": "Second"},
        ]
    return {"lyrics": {"syncType": sync_type, "lines": lines}}


@pytest.fixture
def clock():
    clock = Mock()
    clock.return_value = NOW
    return clock


@pytest.fixture
def agent(clock):
    agent = SyricsAgent("cookie", clock=clock)
    agent.session = Mock()
    return agent


def _urls(agent):
    return [c.args[0] for c in agent.session.get.call_args_list]


class TestSyricsFactory:
    def test_disabled_by_default(self):
        assert SyricsAgent.from_settings(Settings()) is None

    def test_enabled_without_cookie(self):
        assert SyricsAgent.from_settings(Settings(syrics_enabled=True, syrics_sp_dc="")) is None

    def test_cookie_without_enable_flag(self):
        assert SyricsAgent.from_settings(Settings(syrics_sp_dc="cookie")) is None

    def test_enabled_with_cookie(self):
        agent = SyricsAgent.from_settings(Settings(syrics_enabled=True, syrics_sp_dc="cookie"))
        assert isinstance(agent, LyricsAgent)
        assert agent.agent_name() == "syrics"


class TestSyricsAgent:
    def test_full_flow(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(json_data=_search()),
            response_factory(json_data=_lyrics()),
        ]
        lyrics = agent.get_lyrics("Queen", "Bohemian Rhapsody")

        assert lyrics.synced is True
        assert lyrics.display_artist == "Queen"
        assert lyrics.display_title == "Bohemian Rhapsody"
        assert lyrics.lines == [TimedLine(1000, "First"), TimedLine(2500, "Second")]

        token_call, search_call, lyrics_call = agent.session.get.call_args_list
        assert token_call.kwargs["headers"]["Cookie"] == "sp_dc=cookie"
        assert search_call.kwargs["params"] == {
            "q": "track:Bohemian Rhapsody artist:Queen",
            "type": "track",
            "limit": 1,
        }
        assert search_call.kwargs["headers"]["Authorization"] == "Bearer tok"
        assert lyrics_call.args[0] == "https://spclient.wg.spotify.com/color-lyrics/v2/track/abc123"
        assert lyrics_call.kwargs["headers"]["Authorization"] == "Bearer tok"

    def test_cached_token_is_reused(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(json_data=_search()),
            response_factory(json_data=_lyrics()),
            response_factory(json_data=_search()),
            response_factory(json_data=_lyrics()),
        ]
        agent.get_lyrics("Queen", "Bohemian Rhapsody")
        agent.get_lyrics("Queen", "Bohemian Rhapsody")

        assert _urls(agent).count(SyricsAgent.TOKEN_URL) == 1

    def test_expired_token_is_refreshed(self, agent, clock, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token(expiry_s=NOW + 60)),
            response_factory(json_data=_search()),
            response_factory(json_data=_lyrics()),
            response_factory(json_data=_token(expiry_s=NOW + 7200)),
            response_factory(json_data=_search()),
            response_factory(json_data=_lyrics()),
        ]
        agent.get_lyrics("Queen", "Bohemian Rhapsody")
        clock.return_value = NOW + 60
        agent.get_lyrics("Queen", "Bohemian Rhapsody")

        assert _urls(agent).count(SyricsAgent.TOKEN_URL) == 2

    def test_token_failure_aborts(self, agent, response_factory):
        agent.session.get.return_value = response_factory(status_code=401, reason="Unauthorized")
        with pytest.raises(ProtocolError, match="token"):
            agent.get_lyrics("Queen", "Bohemian Rhapsody")
        assert agent.session.get.call_count == 1

    def test_malformed_token_response(self, agent, response_factory):
        agent.session.get.return_value = response_factory(json_data={"unexpected": True})
        with pytest.raises(ProtocolError):
            agent.get_lyrics("Queen", "Bohemian Rhapsody")

    def test_search_failure(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(status_code=500, reason="Internal Server Error"),
        ]
        with pytest.raises(ProtocolError, match="search"):
            agent.get_lyrics("Queen", "Bohemian Rhapsody")

    def test_no_search_match_is_not_found(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(json_data=_search(track_id=None)),
        ]
        assert agent.get_lyrics("Queen", "Bohemian Rhapsody") is None
        assert agent.session.get.call_count == 2

    def test_lyrics_404_is_not_found(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(json_data=_search()),
            response_factory(status_code=404, reason="Not Found"),
        ]
        assert agent.get_lyrics("Queen", "Bohemian Rhapsody") is None

    def test_lyrics_failure(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(json_data=_search()),
            response_factory(status_code=403, reason="Forbidden"),
        ]
        with pytest.raises(ProtocolError, match="403"):
            agent.get_lyrics("Queen", "Bohemian Rhapsody")

    def test_unsynced_lyrics(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(json_data=_search()),
            response_factory(json_data=_lyrics(
                sync_type="UNSYNCED",
                lines=[{"startTimeMs": "0", "words": "Words"}],
            )),
        ]
        lyrics = agent.get_lyrics("Queen", "Bohemian Rhapsody")
        assert lyrics.synced is False
        assert lyrics.lines == [TimedLine(0, "Words")]

    def test_malformed_start_time_defaults_to_zero(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(json_data=_search()),
            response_factory(json_data=_lyrics(lines=[
                {"startTimeMs": "1000", "words": "First"},
                {"startTimeMs": "soon", "words": "Second"},
                {"startTimeMs": "3000", "words": "Third"},
            ])),
        ]
        lyrics = agent.get_lyrics("Queen", "Bohemian Rhapsody")
        assert lyrics.synced is True
        assert lyrics.lines == [
            TimedLine(1000, "First"),
            TimedLine(0, "Second"),
            TimedLine(3000, "Third"),
        ]

    def test_start_time_reads_leading_integer(self, agent, response_factory):
        agent.session.get.side_effect = [
            response_factory(json_data=_token()),
            response_factory(json_data=_search()),
            response_factory(json_data=_lyrics(lines=[
                {"startTimeMs": "1000ms", "words": "First"},
                {"startTimeMs": "12.5", "words": "Second"},
                {"startTimeMs": 3000, "words": "Third"},
                {"startTimeMs": None, "words": "Fourth"},
            ])),
        ]
        lyrics = agent.get_lyrics("Queen", "Bohemian Rhapsody")
        assert [line.start for line in lyrics.lines] == [1000, 12, 3000, 0]

    def test_expired_deadline_skips_request(self, agent):
        with pytest.raises(LyricsCancelled):
            agent.get_lyrics("Queen", "Bohemian Rhapsody", deadline=time.monotonic() - 1)
        agent.session.get.assert_not_called()

    def test_concurrent_callers_share_one_refresh(self, agent, response_factory):
        started = threading.Event()
        release = threading.Event()
        token_calls = []

        def fake_get(url, **kwargs):
            if url == SyricsAgent.TOKEN_URL:
                token_calls.append(url)
                started.set()
                release.wait(timeout=5)
                return response_factory(json_data=_token())
            return response_factory(json_data=_search(track_id=None))

        agent.session.get.side_effect = fake_get

        results = []
        threads = [
            threading.Thread(target=lambda: results.append(agent.get_lyrics("Queen", "Song")))
            for _ in range(3)
        ]
        for thread in threads:
            thread.start()
        started.wait(timeout=5)
        release.set()
        for thread in threads:
            thread.join(timeout=5)

        assert len(token_calls) == 1
        assert results == [None, None, None]
