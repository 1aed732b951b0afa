"""Tests for repository-name parsing and logging setup."""

import json
import logging

import pytest
import structlog

from pubwon.core.github import split_full_name
from pubwon.core.logging import setup_logging


class TestSplitFullName:
    @pytest.mark.parametrize(
        "value",
        [
            "octocat/hello-world",
            "  octocat/hello-world  ",
            "https://github.com/octocat/hello-world",
            "https://github.com/octocat/hello-world.git",
            "https://github.com/octocat/hello-world/tree/main",
            "git@github.com:octocat/hello-world.git",
        ],
    )
    def test_accepted_forms(self, value):
        assert split_full_name(value) == ("octocat", "hello-world")

    @pytest.mark.parametrize("value", ["", "octocat", "a/b/c", "octo cat/repo", "git@github.com"])
    def test_rejected(self, value):
        with pytest.raises(ValueError, match="cannot parse"):
            split_full_name(value)


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _reset(self):
        yield
        structlog.reset_defaults()

    def test_json_output(self, capsys):
        setup_logging(level="DEBUG", fmt="json")
        structlog.get_logger("pubwon.test").info("thing.happened", repository="o/r")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "thing.happened"
        assert event["repository"] == "o/r"
        assert event["level"] == "info"

    def test_env_controls_level(self, monkeypatch):
        monkeypatch.setenv("PUBWON_LOG_LEVEL", "warning")
        setup_logging()
        assert logging.getLogger("pubwon").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
