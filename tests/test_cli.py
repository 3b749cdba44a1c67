"""Tests for the ``python -m buildsync`` entrypoint."""
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from buildsync.__main__ import main
from buildsync.config import settings
from buildsync.errors import RemoteError


def test_prints_storage_reference(build_file):
    with patch("buildsync.__main__.BuildSync") as mock_cls:
        mock_cls.return_value.sync = AsyncMock(return_value="storage:app.ipa")
        result = CliRunner().invoke(
            main, [str(build_file), "--account", "alice", "--access-key", "secret"]
        )

    assert result.exit_code == 0, result.output
    assert result.output.strip().endswith("storage:app.ipa")
    mock_cls.assert_called_once_with("alice", "secret")
    mock_cls.return_value.sync.assert_awaited_once_with(str(build_file), upload_timeout=None)


def test_upload_timeout_option(build_file):
    with patch("buildsync.__main__.BuildSync") as mock_cls:
        mock_cls.return_value.sync = AsyncMock(return_value="storage:app.ipa")
        result = CliRunner().invoke(
            main,
            [str(build_file), "-u", "alice", "-k", "secret", "--upload-timeout", "300"],
        )

    assert result.exit_code == 0, result.output
    mock_cls.return_value.sync.assert_awaited_once_with(str(build_file), upload_timeout=300.0)


def test_credentials_fall_back_to_settings(build_file, monkeypatch):
    monkeypatch.setattr(settings, "storage_account", "env-user")
    monkeypatch.setattr(settings, "storage_access_key", "env-key")

    with patch("buildsync.__main__.BuildSync") as mock_cls:
        mock_cls.return_value.sync = AsyncMock(return_value="storage:app.ipa")
        result = CliRunner().invoke(main, [str(build_file)])

    assert result.exit_code == 0, result.output
    mock_cls.assert_called_once_with("env-user", "env-key")


def test_missing_credentials_is_usage_error(build_file, monkeypatch):
    monkeypatch.setattr(settings, "storage_account", "")
    monkeypatch.setattr(settings, "storage_access_key", "")

    result = CliRunner().invoke(main, [str(build_file)])

    assert result.exit_code == 2
    assert "access key" in result.output


def test_sync_error_exits_non_zero(build_file):
    with patch("buildsync.__main__.BuildSync") as mock_cls:
        mock_cls.return_value.sync = AsyncMock(
            side_effect=RemoteError(500, stage="inventory")
        )
        result = CliRunner().invoke(main, [str(build_file), "-u", "alice", "-k", "secret"])

    assert result.exit_code == 1
    assert "status 500" in result.output
