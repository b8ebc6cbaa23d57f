"""Tests for the command-line interface."""

import asyncio
import json
import logging

import httpx
import pytest
from typer.testing import CliRunner

from claude_news import cli
from claude_news.cli import app
from claude_news.config import AppConfig, StorageConfig
from claude_news.core.types import ConcurrentRefreshRejected, RefreshResult
from claude_news.service import NewsService
from claude_news.logging_utils import LOGGER_NAME
from claude_news.store import ArticleStore


runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def data_file(tmp_path, monkeypatch, article_factory, snapshot_factory):
    path = tmp_path / "news.json"
    ArticleStore(path).replace(
        snapshot_factory(
            [
                article_factory("Claude Code 2.0", relevance=100, category="releases"),
                article_factory("Claude Opus review", relevance=45),
                article_factory("Minor mention", relevance=10, category="community"),
            ]
        )
    )
    monkeypatch.setenv("CLAUDE_NEWS_DATA_FILE", str(path))
    return path


def test_categories_command():
    result = runner.invoke(app, ["categories"])

    assert result.exit_code == 0
    ids = [item["id"] for item in json.loads(result.output)]
    assert ids == ["official", "releases", "tech", "tutorials", "articles", "community"]


def test_query_command_json(data_file):
    result = runner.invoke(app, ["query", "--category", "tech", "--json", "--log-level", "WARNING"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["total"] == 1
    assert payload["totalPages"] == 1
    assert payload["articles"][0]["title"] == "Claude Opus review"


def test_stats_command(data_file):
    result = runner.invoke(app, ["stats", "--log-level", "WARNING"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["totalArticles"] == 3
    assert payload["avgRelevance"] == 52
    assert payload["scheduler"]["running"] is False


RSS = b"""<?xml version="1.0"?>
<rss version="2.0"><channel><title>t</title>
<item><title>Claude Code adds hooks</title><link>https://example.com/hooks</link></item>
<item><title>Claude Sonnet benchmark</title><link>https://example.com/sonnet</link></item>
</channel></rss>
"""

CONFIG = """\
logging:
  console: false
sources:
  - name: Feed
    category: tech
    url: https://example.com/rss
"""


class _StubService:
    def __init__(self, result):
        self.result = result

    def load(self):
        return True

    async def trigger_refresh(self):
        return self.result


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


def test_refresh_command_runs_cycle(data_file, config_file, monkeypatch):
    def _service(cfg):
        def _factory(fetch_cfg):
            return httpx.AsyncClient(
                transport=httpx.MockTransport(lambda request: httpx.Response(200, content=RSS))
            )

        return NewsService(cfg, client_factory=_factory)

    monkeypatch.setattr(cli, "NewsService", _service)

    result = runner.invoke(app, ["refresh", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "total=2, new=2, sources_ok=1, sources_failed=0" in result.output
    assert json.loads(data_file.read_text(encoding="utf-8"))["count"] == 2


def test_refresh_command_rejected_while_fetching(config_file, monkeypatch):
    monkeypatch.setattr(cli, "NewsService", lambda cfg: _StubService(ConcurrentRefreshRejected()))

    result = runner.invoke(app, ["refresh", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Refresh already in progress" in result.output


def test_refresh_command_reports_unsaved_snapshot(config_file, monkeypatch):
    unsaved = RefreshResult(total_articles=0, new_count=0, saved=False)
    monkeypatch.setattr(cli, "NewsService", lambda cfg: _StubService(unsaved))

    result = runner.invoke(app, ["refresh", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Snapshot was not saved to disk" in result.output


def test_featured_command(data_file):
    result = runner.invoke(app, ["featured", "--log-level", "WARNING"])

    assert result.exit_code == 0
    assert "Featured" in result.output
    assert "Claude Code 2.0" in result.output
    assert "Claude Opus review" in result.output
    assert "Minor mention" not in result.output


def test_run_loop_shuts_down_cleanly_when_cancelled(data_file):
    service = NewsService(AppConfig(storage=StorageConfig(data_file=str(data_file)), sources=[]))

    async def _run():
        task = asyncio.create_task(cli._run_forever(service))
        await asyncio.sleep(0.05)
        assert service.scheduler.running
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(_run())

    assert service.scheduler.running is False
