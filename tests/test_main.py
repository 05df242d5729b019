"""Tests for the bbprs CLI."""

import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import yaml

from bbprs.adapters import TransportError
from bbprs.main import (
    EXIT_CONFIG_ERROR,
    EXIT_DISCOVERY_ERROR,
    EXIT_INTERRUPTED,
    EXIT_OK,
    main,
    parse_args,
)
from bbprs.models import PullRequest


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in ("BITBUCKET_OWNER", "BITBUCKET_REPO_SLUG", "BITBUCKET_AUTH", "BITBUCKET_USERNAME"):
        monkeypatch.delenv(key, raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("bitbucket:\n  owner: acme\n  repo_slug: widgets\n")
    return path


def _service(pulls: list) -> Mock:
    service = Mock()
    service.list.return_value = pulls
    return service


def test_parse_args_accepts_list_subcommand() -> None:
    args = parse_args(["list", "--config", "x.yaml", "--format", "yaml"])
    assert args.config == Path("x.yaml")
    assert args.format == "yaml"
    assert args.timeout is None


def test_parse_args_rejects_non_positive_timeout() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--timeout", "0"])


def test_prints_json(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    pulls = [PullRequest(number=42, branch="feature/x", head_sha="abc123")]
    with patch("bbprs.main.build_service", return_value=_service(pulls)):
        code = main(["--config", str(config_path)])

    assert code == EXIT_OK
    assert json.loads(capsys.readouterr().out) == [{"number": 42, "branch": "feature/x", "head_sha": "abc123"}]


def test_prints_yaml(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    pulls = [PullRequest(number=1, branch="b", head_sha="s")]
    with patch("bbprs.main.build_service", return_value=_service(pulls)):
        code = main(["list", "--config", str(config_path), "--format", "yaml"])

    assert code == EXIT_OK
    assert yaml.safe_load(capsys.readouterr().out) == [{"number": 1, "branch": "b", "head_sha": "s"}]


def test_timeout_is_passed_as_context(config_path: Path) -> None:
    service = _service([])
    with patch("bbprs.main.build_service", return_value=service):
        main(["--config", str(config_path), "--timeout", "5"])
    ctx = service.list.call_args[0][0]
    remaining = ctx.remaining()
    assert remaining is not None and 0 < remaining <= 5


def test_discovery_error_exit_code(config_path: Path) -> None:
    service = Mock()
    service.list.side_effect = TransportError("boom")
    with patch("bbprs.main.build_service", return_value=service):
        assert main(["--config", str(config_path)]) == EXIT_DISCOVERY_ERROR


def test_config_error_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BITBUCKET_PASSWORD", raising=False)
    monkeypatch.delenv("BITBUCKET_PASSWORD_FILE", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("bitbucket:\n  owner: acme\n  repo_slug: widgets\n  auth: basic\n")
    assert main(["--config", str(path)]) == EXIT_CONFIG_ERROR


def test_check_only(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with patch("bbprs.main.build_service") as build:
        code = main(["--config", str(config_path), "--check"])
    assert code == EXIT_OK
    build.return_value.list.assert_not_called()
    assert "acme/widgets" in capsys.readouterr().out


def test_non_mapping_yaml_exit_code(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")
    assert main(["--config", str(path)]) == EXIT_CONFIG_ERROR


def test_unreadable_secret_file_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BITBUCKET_TOKEN", raising=False)
    monkeypatch.setenv("BITBUCKET_TOKEN_FILE", str(tmp_path / "missing-token"))
    path = tmp_path / "config.yaml"
    path.write_text("bitbucket:\n  owner: acme\n  repo_slug: widgets\n  auth: bearer\n")
    assert main(["--config", str(path)]) == EXIT_CONFIG_ERROR


def test_keyboard_interrupt_exit_code(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    service = Mock()
    service.list.side_effect = KeyboardInterrupt
    with patch("bbprs.main.build_service", return_value=service):
        assert main(["--config", str(config_path)]) == EXIT_INTERRUPTED
    assert capsys.readouterr().out == ""
