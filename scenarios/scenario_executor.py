"""
Scenario Executor — uruchamia pojedynczy scenariusz testowy.
Używa StorefrontContext + StorefrontRunner zamiast bezpośrednich wywołań Playwright.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from playwright.async_api import async_playwright
from sqlalchemy.orm import Session

from app.models.run import ScenarioRun, RunStatus
from scenarios.context import StorefrontContext
from scenarios.storefront_runner import StorefrontRunner, StorefrontRunResult

logger = logging.getLogger(__name__)


class ScenarioExecutor:
    """Wykonuje pojedynczy scenariusz testowy przez Playwright."""

    VIEWPORT = {'width': 1280, 'height': 720}

    def __init__(
        self,
        scenario_name: str,
        context: StorefrontContext,
        suite_run_id: int,
        db: Session,
        headless: bool = True,
    ):
        self.scenario_name = scenario_name
        self.context = context
        self.suite_run_id = suite_run_id
        self.db = db
        self.headless = headless
        self.scenario_run = None

    async def run(self) -> ScenarioRun:
        """Uruchamia scenariusz i zwraca ScenarioRun z wynikami."""

        self.scenario_run = ScenarioRun(
            suite_run_id=self.suite_run_id,
            scenario_name=self.scenario_name,
            status=RunStatus.RUNNING,
            started_at=datetime.now(timezone.utc),
        )
        self.db.add(self.scenario_run)
        self.db.commit()
        self.db.refresh(self.scenario_run)

        logger.info(f"[RUN #{self.scenario_run.id}] Start: {self.scenario_name}")

        try:
            result = await self._execute()
            self._save_result(result)

        except Exception as e:
            logger.error(f"[RUN #{self.scenario_run.id}] Nieoczekiwany błąd: {e}", exc_info=True)
            self.scenario_run.status = RunStatus.FAILED
            self.scenario_run.error_message = str(e)

        finally:
            self.scenario_run.finished_at = datetime.now(timezone.utc)
            self.db.commit()

            logger.info(
                f"[RUN #{self.scenario_run.id}] Finished: {self.scenario_run.status.value} | "
                f"Duration: {self.scenario_run.duration_seconds}s"
            )

        return self.scenario_run

    async def _execute(self) -> StorefrontRunResult:
        """Uruchamia Playwright i przekazuje sterowanie do StorefrontRunner."""

        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=self.headless)
            browser_context = await browser.new_context(viewport=self.VIEWPORT)
            page = await browser_context.new_page()

            try:
                screenshot_dir = f"screenshots/{self.suite_run_id}/{self.scenario_run.id}"
                Path(screenshot_dir).mkdir(parents=True, exist_ok=True)

                runner = StorefrontRunner(page=page, context=self.context, screenshot_dir=screenshot_dir)
                return await runner.run(self.scenario_name)

            finally:
                await browser_context.close()
                await browser.close()

    def _save_result(self, result: StorefrontRunResult) -> None:
        run = self.scenario_run
        rd = result.run_data

        run.status = RunStatus.SUCCESS if result.success else RunStatus.FAILED
        run.stopped_at = result.stopped_at
        run.error_message = result.error

        if rd.product and rd.product.name:
            run.product_name = rd.product.name

        if rd.checkout and rd.checkout.order_number:
            run.order_number = rd.checkout.order_number

        if result.screenshots:
            run.screenshot_url = list(result.screenshots.values())[-1]

        if result.stopped_at:
            logger.info(
                f"[RUN #{run.id}] Zatrzymano na: {result.stopped_at} | "
                f"Sukces: {result.success}"
            )
