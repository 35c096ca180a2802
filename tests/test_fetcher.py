import asyncio

import httpx
import pytest

from chess_insights.chesscom_client import ChessComClient
from chess_insights.config import CHESSCOM_USER_AGENT
from chess_insights.errors import FetchFailed, NotFound, PlayerNotFound, TransientError
from chess_insights.services.fetcher import ArchiveFetcher
from tests.testkit import archive_url, archives_url


def _with_fetcher(chesscom, policy, coro_fn):
  async def go():
    async with ChessComClient(transport=chesscom.transport) as cc:
      return await coro_fn(ArchiveFetcher(cc, policy))
  return asyncio.run(go())


def _with_client(chesscom, coro_fn):
  async def go():
    async with ChessComClient(transport=chesscom.transport) as cc:
      return await coro_fn(cc)
  return asyncio.run(go())


def test_client_maps_404_to_not_found(chesscom):
  with pytest.raises(NotFound):
    _with_client(chesscom, lambda cc: cc.get_json(archives_url("ghost")))


def test_client_maps_5xx_and_transport_errors_to_transient(chesscom):
  chesscom.routes[archives_url("a")] = (500, {})
  chesscom.routes[archives_url("b")] = (0, httpx.ConnectError("connection refused"))
  with pytest.raises(TransientError):
    _with_client(chesscom, lambda cc: cc.get_json(archives_url("a")))
  with pytest.raises(TransientError):
    _with_client(chesscom, lambda cc: cc.get_json(archives_url("b")))


def test_client_sends_user_agent():
  seen = {}

  def handler(request):
    seen["ua"] = request.headers.get("user-agent")
    return httpx.Response(200, json={"archives": []})

  async def go():
    async with ChessComClient(transport=httpx.MockTransport(handler)) as cc:
      return await cc.get_json(cc.archives_url("alice"))

  asyncio.run(go())
  assert seen["ua"] == CHESSCOM_USER_AGENT


def test_list_archives(chesscom, policy):
  urls = [archive_url("alice", 2024, 4), archive_url("alice", 2024, 5)]
  chesscom.routes[archives_url("alice")] = (200, {"archives": urls})
  assert _with_fetcher(chesscom, policy, lambda f: f.list_archives("alice")) == urls


def test_list_archives_missing_key_is_empty(chesscom, policy):
  chesscom.routes[archives_url("alice")] = (200, {})
  assert _with_fetcher(chesscom, policy, lambda f: f.list_archives("alice")) == []


def test_unknown_player_is_not_retried(chesscom, policy, sleeper):
  with pytest.raises(PlayerNotFound) as ei:
    _with_fetcher(chesscom, policy, lambda f: f.list_archives("ghost"))
  assert ei.value.username == "ghost"
  assert chesscom.count(archives_url("ghost")) == 1
  assert sleeper.delays == []


def test_transient_failures_exhaust_into_fetch_failed(chesscom, policy, sleeper):
  url = archive_url("alice", 2024, 5)
  chesscom.routes[url] = (503, {})
  with pytest.raises(FetchFailed) as ei:
    _with_fetcher(chesscom, policy, lambda f: f.fetch_archive(url))
  assert ei.value.url == url
  assert chesscom.count(url) == 3
  assert sleeper.delays == [0.5, 1.0]


def test_fetch_archive_returns_games(chesscom, policy):
  url = archive_url("alice", 2024, 5)
  chesscom.routes[url] = (200, {"games": [{"time_class": "blitz"}, "junk"]})
  assert _with_fetcher(chesscom, policy, lambda f: f.fetch_archive(url)) == [{"time_class": "blitz"}]


def test_missing_archive_is_a_fetch_failure(chesscom, policy, sleeper):
  url = archive_url("alice", 2024, 5)
  with pytest.raises(FetchFailed) as ei:
    _with_fetcher(chesscom, policy, lambda f: f.fetch_archive(url))
  assert ei.value.url == url
  assert str(ei.value) == f"Failed to fetch {url}"
  assert chesscom.count(url) == 1
  assert sleeper.delays == []
