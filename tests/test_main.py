"""
Test configuration loading and the command line entry point
"""

import os
import sys
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from adsdump import main as cli
from adsdump.coreutils.config import Config, mask_token
from adsdump.coreutils.errors import ConfigError, DiscoveryError
from adsdump.orchestration.pipeline import RunOutcome

LONG_TOKEN = "EAAGm0PX4ZCpsBAKZBxyz0123456789abcdefSECRET"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("FB_ACCESS_TOKEN", "FB_API_VERSION", "FB_GRAPH_BASE_URL"):
        monkeypatch.delenv(key, raising=False)


def test_mask_token():
    assert mask_token("short") == "***"
    assert mask_token("x" * 20) == "***"
    assert mask_token(LONG_TOKEN) == f"{LONG_TOKEN[:10]}...{LONG_TOKEN[-10:]}"


def test_config_repr_hides_token():
    config = Config(access_token=LONG_TOKEN)
    assert LONG_TOKEN not in repr(config)
    assert config.masked_token == mask_token(LONG_TOKEN)


def test_config_validation():
    with pytest.raises(ConfigError):
        Config(access_token="")
    with pytest.raises(ConfigError):
        Config(access_token="t", max_pages=-1)
    with pytest.raises(ConfigError):
        Config(access_token="t", insights_since=date(2026, 1, 1))
    with pytest.raises(ConfigError):
        Config(
            access_token="t",
            insights_since=date(2026, 2, 1),
            insights_until=date(2026, 1, 1),
        )


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("FB_ACCESS_TOKEN", "env-token")
    monkeypatch.setenv("FB_API_VERSION", "v21.0")

    config = Config.from_env(max_pages=3)

    assert config.access_token == "env-token"
    assert config.api_version == "v21.0"
    assert config.base_url == "https://graph.facebook.com"
    assert config.max_pages == 3


def test_explicit_token_wins_over_env(monkeypatch):
    monkeypatch.setenv("FB_ACCESS_TOKEN", "env-token")
    assert Config.from_env(access_token="flag-token").access_token == "flag-token"


@patch("adsdump.main.setup_logging")
def test_missing_token_exits_1(mock_logging):
    assert cli.main([]) == 1


@patch("adsdump.main.setup_logging")
@patch("adsdump.main.AccountOrchestrator")
def test_run_success(mock_orchestrator_cls, mock_logging, monkeypatch, capsys):
    monkeypatch.setenv("FB_ACCESS_TOKEN", "env-token")
    orchestrator = MagicMock()
    orchestrator.run.return_value = RunOutcome(
        accounts_discovered=2, accounts_processed=2, accounts_successful=1
    )
    mock_orchestrator_cls.return_value = orchestrator

    code = cli.main(["--max-pages", "4", "--since", "2026-01-01", "--until", "2026-02-03"])

    assert code == 0
    config = mock_orchestrator_cls.call_args.args[0]
    assert config.access_token == "env-token"
    assert config.max_pages == 4
    assert config.insights_since == date(2026, 1, 1)
    orchestrator.sink.prepare.assert_called_once()
    assert "1/2 accounts fully fetched (2 discovered)" in capsys.readouterr().out


@patch("adsdump.main.setup_logging")
@patch("adsdump.main.AccountOrchestrator")
def test_discovery_failure_exits_1(mock_orchestrator_cls, mock_logging):
    orchestrator = MagicMock()
    orchestrator.run.side_effect = DiscoveryError("Failed to fetch ad accounts")
    mock_orchestrator_cls.return_value = orchestrator

    assert cli.main(["--token", "flag-token"]) == 1


@patch("adsdump.main.setup_logging")
@patch("adsdump.main.AccountOrchestrator")
def test_no_accounts_exits_0(mock_orchestrator_cls, mock_logging):
    orchestrator = MagicMock()
    orchestrator.run.return_value = RunOutcome()
    mock_orchestrator_cls.return_value = orchestrator

    assert cli.main(["--token", "flag-token"]) == 0


@patch("adsdump.main.setup_logging")
@patch("adsdump.main.AccountOrchestrator")
def test_output_dir_failure_exits_1(mock_orchestrator_cls, mock_logging):
    orchestrator = MagicMock()
    orchestrator.sink.prepare.side_effect = PermissionError("denied")
    mock_orchestrator_cls.return_value = orchestrator

    assert cli.main(["--token", "flag-token", "--output", "/nope"]) == 1
    orchestrator.run.assert_not_called()


def test_negative_max_pages_rejected():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--max-pages", "-1"])


@patch("adsdump.main.AccountOrchestrator")
def test_debug_configuration_line_masks_token(mock_orchestrator_cls, caplog):
    orchestrator = MagicMock()
    orchestrator.run.return_value = RunOutcome()
    mock_orchestrator_cls.return_value = orchestrator

    with patch("adsdump.main.setup_logging"), caplog.at_level("DEBUG", logger="adsdump"):
        assert cli.main(["--token", LONG_TOKEN, "--debug"]) == 0

    assert f"(token {mask_token(LONG_TOKEN)})" in caplog.text
    assert LONG_TOKEN not in caplog.text
