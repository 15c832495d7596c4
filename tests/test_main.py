import pytest

import main
from scenarios.storefront_runner import SCENARIOS


class TestParseArgs:
    def test_defaults(self):
        args = main.parse_args([])

        assert args == {
            "scenario": None,
            "workers": main.DEFAULT_WORKERS,
            "base_url": None,
            "headless": False,
            "list": False,
        }

    def test_all_options(self):
        args = main.parse_args([
            "--scenario", "checkout_card", "--workers", "4",
            "--base-url", "https://shop.test", "--headless",
        ])

        assert args["scenario"] == "checkout_card"
        assert args["workers"] == 4
        assert args["base_url"] == "https://shop.test"
        assert args["headless"] is True


class TestSelectScenarios:
    def test_all_by_default(self):
        assert main.select_scenarios(None) == list(SCENARIOS)

    def test_single(self):
        assert main.select_scenarios("login_authed") == ["login_authed"]

    def test_unknown_exits(self):
        with pytest.raises(SystemExit):
            main.select_scenarios("refund")


def test_list_prints_scenarios(capsys):
    assert main.main(["--list"]) == 0

    out = capsys.readouterr().out
    for name in SCENARIOS:
        assert name in out


def test_main_exit_code_reflects_failures(monkeypatch):
    async def fake_run_suite(scenarios, context, workers, headless):
        assert scenarios == ["login_authed"]
        assert context.base_url == "https://shop.test"
        return 1

    monkeypatch.setattr(main, "setup_logging", lambda: None)
    monkeypatch.setattr(main, "init_db", lambda: None)
    monkeypatch.setattr(main, "run_suite", fake_run_suite)

    assert main.main(["--scenario", "login_authed", "--base-url", "https://shop.test"]) == 1
