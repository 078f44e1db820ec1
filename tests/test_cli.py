"""Tests for cloudput CLI helpers."""
import logging
import os

import pytest

from conftest import FakeStorageClient
from cloudput.cli import (
    CLIError,
    _build_config,
    _build_parser,
    _load_env_file,
    _parse_env_line,
    _run_put,
    _setup_logging,
    run_cli,
)
from cloudput.errors import StorageAPIError
from cloudput.models import DEFAULT_API_URL, UploadConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for key in ("CLOUDPUT_ACCESS_TOKEN", "CLOUDPUT_API_URL", "CLOUDPUT_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    # keep a stray .env in the working directory out of the tests
    monkeypatch.chdir(tmp_path)
    yield
    logging.disable(logging.NOTSET)


def _args(argv):
    return _build_parser().parse_args(argv)


def test_load_env_file(tmp_path, monkeypatch):
    env_path = tmp_path / "custom.env"
    env_path.write_text(
        "\n".join(
            [
                "# comment",
                "CLOUDPUT_ACCESS_TOKEN=abc123",
                "CLOUDPUT_API_URL='http://127.0.0.1:9000'",
                "export CLOUDPUT_TIMEOUT=12",
            ]
        ),
        encoding="utf-8",
    )

    _load_env_file(env_path)

    assert os.environ["CLOUDPUT_ACCESS_TOKEN"] == "abc123"
    assert os.environ["CLOUDPUT_API_URL"] == "http://127.0.0.1:9000"
    assert os.environ["CLOUDPUT_TIMEOUT"] == "12"


def test_load_env_file_keeps_existing(tmp_path, monkeypatch):
    monkeypatch.setenv("CLOUDPUT_ACCESS_TOKEN", "from-env")
    env_path = tmp_path / "custom.env"
    env_path.write_text("CLOUDPUT_ACCESS_TOKEN=from-file\n", encoding="utf-8")

    _load_env_file(env_path)

    assert os.environ["CLOUDPUT_ACCESS_TOKEN"] == "from-env"


def test_load_env_file_missing(tmp_path):
    with pytest.raises(CLIError, match="not found"):
        _load_env_file(tmp_path / "absent.env")


def test_setup_logging_defaults_to_silent():
    mode = _setup_logging(debug=False, silent=False, log_level=None)
    assert mode == "silent"
    assert logging.getLogger().isEnabledFor(logging.ERROR) is False


def test_setup_logging_debug_mode():
    mode = _setup_logging(debug=True, silent=False, log_level=None)
    assert mode == "DEBUG"
    assert logging.getLogger().isEnabledFor(logging.DEBUG) is True


def test_setup_logging_explicit_level():
    mode = _setup_logging(debug=False, silent=False, log_level="warning")
    assert mode == "WARNING"
    assert logging.getLogger().isEnabledFor(logging.INFO) is False


def test_parser_put_flags():
    args = _args(["put", "-d", "/dst", "-f", "a.txt", "b.txt"])
    assert args.command == "put"
    assert args.sources == ["a.txt", "b.txt"]
    assert args.destination == "/dst"
    assert args.force is True


def test_build_config_from_env(monkeypatch):
    monkeypatch.setenv("CLOUDPUT_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("CLOUDPUT_TIMEOUT", "42")

    config = _build_config(_args(["put", "--no-progress", "a.txt"]))

    assert config == UploadConfig(
        access_token="tok",
        api_url=DEFAULT_API_URL,
        timeout=42.0,
        destination=None,
        force=False,
        show_progress=False,
    )


def test_build_config_flags_override_env(monkeypatch):
    monkeypatch.setenv("CLOUDPUT_ACCESS_TOKEN", "env-token")
    monkeypatch.setenv("CLOUDPUT_API_URL", "http://env")

    config = _build_config(
        _args(["--token", "flag-token", "--api-url", "http://flag", "--timeout", "5", "put", "a"])
    )

    assert config.access_token == "flag-token"
    assert config.api_url == "http://flag"
    assert config.timeout == 5.0


def test_build_config_requires_token():
    with pytest.raises(CLIError, match="access token"):
        _build_config(_args(["put", "a.txt"]))


def test_build_config_bad_timeout(monkeypatch):
    monkeypatch.setenv("CLOUDPUT_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("CLOUDPUT_TIMEOUT", "soon")
    with pytest.raises(CLIError, match="CLOUDPUT_TIMEOUT"):
        _build_config(_args(["put", "a.txt"]))


def test_run_cli_without_token(capsys):
    assert run_cli(["put", "a.txt"]) == 1
    assert "access token" in capsys.readouterr().err


def test_run_cli_no_operands(monkeypatch, capsys):
    monkeypatch.setenv("CLOUDPUT_ACCESS_TOKEN", "tok")
    assert run_cli(["put"]) == 1
    assert "missing operands" in capsys.readouterr().err


def test_run_cli_without_command():
    assert run_cli([]) == 0


@pytest.mark.asyncio
async def test_run_put_success(make_file):
    client = FakeStorageClient()
    sources = [str(make_file("a.txt", 3)), str(make_file("b.txt", 4))]
    config = UploadConfig(access_token="tok", destination="/dst", show_progress=False)

    code = await _run_put(config, sources, client)

    assert code == 0
    assert sorted(client.objects) == ["/dst/a.txt", "/dst/b.txt"]


@pytest.mark.asyncio
async def test_run_put_reports_failure(make_file, tmp_path):
    client = FakeStorageClient(fail_paths={"/b.txt": StorageAPIError(500, "upload", "boom")})
    sources = [str(make_file("a.txt", 3)), str(make_file("b.txt", 4))]
    config = UploadConfig(access_token="tok", show_progress=False)

    code = await _run_put(config, sources, client)

    assert code == 1
    assert list(client.objects) == ["/a.txt"]


def test_parse_env_line():
    assert _parse_env_line("KEY=value") == ("KEY", "value")
    assert _parse_env_line("export  KEY = 'quoted value' ") == ("KEY", "quoted value")
    assert _parse_env_line('KEY="a=b"') == ("KEY", "a=b")
    assert _parse_env_line("# KEY=value") is None
    assert _parse_env_line("   ") is None
    assert _parse_env_line("no-separator") is None
    assert _parse_env_line("=value") is None


def test_load_env_file_returns_applied(tmp_path, monkeypatch):
    monkeypatch.setenv("CLOUDPUT_API_URL", "http://kept")
    env_path = tmp_path / "custom.env"
    env_path.write_text("CLOUDPUT_API_URL=http://file\nCLOUDPUT_TIMEOUT=9\n", encoding="utf-8")

    applied = _load_env_file(env_path)

    assert applied == {"CLOUDPUT_TIMEOUT": "9"}
    assert os.environ["CLOUDPUT_API_URL"] == "http://kept"


def test_load_env_file_rejects_directory(tmp_path):
    with pytest.raises(CLIError, match="is not a file"):
        _load_env_file(tmp_path)
