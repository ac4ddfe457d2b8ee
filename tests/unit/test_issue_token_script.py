"""Tests for the issue_token operator script."""

import logging
import sys

import pytest

from scripts import issue_token


@pytest.fixture
def no_database(monkeypatch):
    async def _noop(**_kwargs):
        return None

    monkeypatch.setattr(issue_token.db_client, "init_db", _noop)
    monkeypatch.setattr(issue_token.db_client, "close_connection", _noop)


@pytest.mark.unit
class TestIssueTokenScript:
    """Argument handling of scripts/issue_token.py."""

    @pytest.mark.parametrize(
        ("argv", "message"),
        [
            (["riley@example.com", "--role", "owner"], "--role must be one of"),
            (["riley@example.com", "--role"], "--role must be one of"),
            (["riley@example.com", "--name"], "--name needs a value"),
        ],
    )
    async def test_bad_flags_print_usage_and_exit(self, monkeypatch, caplog, no_database, argv, message):
        monkeypatch.setattr(sys, "argv", ["issue_token.py", *argv])
        caplog.set_level(logging.INFO)

        with pytest.raises(SystemExit) as exc_info:
            await issue_token.main()

        assert exc_info.value.code == 1
        assert message in caplog.text
        assert "Usage:" in caplog.text

    async def test_no_arguments_prints_usage(self, monkeypatch, caplog):
        monkeypatch.setattr(sys, "argv", ["issue_token.py"])
        caplog.set_level(logging.INFO)

        await issue_token.main()

        assert "Usage:" in caplog.text
