import logging

import pytest

from app.models import RunStatus, ScenarioRun, SuiteRun, SuiteRunStatus
from scenarios.run_data import CheckoutData, ProductData, RunData
from scenarios.scenario_executor import ScenarioExecutor
from scenarios.storefront_runner import StorefrontRunResult
from scenarios.suite_executor import SuiteExecutor


def make_result(scenario, success=True, **kwargs):
    return StorefrontRunResult(scenario=scenario, run_data=RunData(), success=success, **kwargs)


@pytest.fixture
def suite_run(db, context):
    suite_run = SuiteRun(base_url=context.base_url, total_scenarios=1)
    db.add(suite_run)
    db.commit()
    return suite_run


class TestScenarioExecutor:
    async def test_successful_run_is_saved(self, monkeypatch, db, context, suite_run):
        run_data = RunData(
            product=ProductData(name="Album", added_to_cart=True),
            checkout=CheckoutData(order_received=True, order_number="1234"),
        )

        async def fake_execute(self):
            return StorefrontRunResult(
                scenario="checkout_card",
                run_data=run_data,
                screenshots={"login": "shots/login.png", "order_received": "shots/order_received.png"},
            )

        monkeypatch.setattr(ScenarioExecutor, "_execute", fake_execute)

        run = await ScenarioExecutor("checkout_card", context, suite_run.id, db).run()

        assert run.status == RunStatus.SUCCESS
        assert run.product_name == "Album"
        assert run.order_number == "1234"
        assert run.screenshot_url == "shots/order_received.png"
        assert run.finished_at is not None
        assert run.duration_seconds is not None

    async def test_failed_result_keeps_stage_and_error(self, monkeypatch, db, context, suite_run):
        async def fake_execute(self):
            return make_result("login_authed", success=False, stopped_at="login", error="Unable to find username field")

        monkeypatch.setattr(ScenarioExecutor, "_execute", fake_execute)

        run = await ScenarioExecutor("login_authed", context, suite_run.id, db).run()

        assert run.status == RunStatus.FAILED
        assert run.stopped_at == "login"
        assert run.error_message == "Unable to find username field"

    async def test_browser_crash_marks_run_failed(self, monkeypatch, db, context, suite_run):
        async def fake_execute(self):
            raise RuntimeError("Browser closed")

        monkeypatch.setattr(ScenarioExecutor, "_execute", fake_execute)

        run = await ScenarioExecutor("login_authed", context, suite_run.id, db).run()

        assert run.status == RunStatus.FAILED
        assert run.error_message == "Browser closed"
        assert db.query(ScenarioRun).count() == 1


class TestSuiteExecutor:
    @pytest.fixture(autouse=True)
    def log_dir(self, monkeypatch, tmp_path):
        monkeypatch.setattr(SuiteExecutor, "LOG_DIR", str(tmp_path / "logs"))
        return tmp_path / "logs"

    @staticmethod
    def patch_outcomes(monkeypatch, outcomes: dict[str, bool]):
        async def fake_execute(self):
            return make_result(self.scenario_name, success=outcomes[self.scenario_name])

        monkeypatch.setattr(ScenarioExecutor, "_execute", fake_execute)

    async def test_all_scenarios_pass(self, monkeypatch, db, context):
        self.patch_outcomes(monkeypatch, {"login_authed": True, "checkout_card": True})

        suite_run = await SuiteExecutor(["login_authed", "checkout_card"], context, workers=2, headless=True, db=db).run()

        assert suite_run.status == SuiteRunStatus.SUCCESS
        assert suite_run.success_scenarios == 2
        assert suite_run.failed_scenarios == 0
        assert db.query(ScenarioRun).filter_by(suite_run_id=suite_run.id).count() == 2

    async def test_partial_status(self, monkeypatch, db, context):
        self.patch_outcomes(monkeypatch, {"login_authed": True, "checkout_declined_card": False})

        suite_run = await SuiteExecutor(
            ["login_authed", "checkout_declined_card"], context, workers=1, headless=True, db=db,
        ).run()

        assert suite_run.status == SuiteRunStatus.PARTIAL
        assert suite_run.success_scenarios == 1
        assert suite_run.failed_scenarios == 1

    async def test_all_failed(self, monkeypatch, db, context):
        self.patch_outcomes(monkeypatch, {"checkout_card": False})

        suite_run = await SuiteExecutor(["checkout_card"], context, workers=1, headless=True, db=db).run()

        assert suite_run.status == SuiteRunStatus.FAILED
        assert suite_run.base_url == "https://shop.test"

    async def test_executor_crash_is_logged_to_suite_file(self, monkeypatch, db, context, log_dir):
        async def crashing_run(self):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(ScenarioExecutor, "run", crashing_run)

        suite_run = await SuiteExecutor(["login_authed"], context, workers=1, headless=True, db=db).run()

        assert suite_run.status == SuiteRunStatus.FAILED
        log_text = (log_dir / f"suite_run_{suite_run.id}.log").read_text(encoding="utf-8")
        assert "ERROR in scenario: login_authed" in log_text
        assert "database is locked" in log_text

    async def test_suite_log_handler_is_removed(self, monkeypatch, db, context):
        self.patch_outcomes(monkeypatch, {"login_authed": True})
        handlers_before = list(logging.getLogger().handlers)

        await SuiteExecutor(["login_authed"], context, workers=1, headless=True, db=db).run()

        assert logging.getLogger().handlers == handlers_before
