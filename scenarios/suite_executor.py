"""
Suite Executor — uruchamia zestaw scenariuszy i agreguje wyniki.
"""

import asyncio
import logging
import traceback
from datetime import datetime, timezone
from pathlib import Path
from sqlalchemy.orm import Session

from app.models.suite_run import SuiteRun, SuiteRunStatus
from scenarios.context import StorefrontContext
from scenarios.scenario_executor import ScenarioExecutor

logger = logging.getLogger(__name__)


class SuiteExecutor:
    """Orchestrator suite — tworzy suite_run, uruchamia scenariusze równolegle, agreguje wyniki."""

    LOG_DIR = "logs"

    def __init__(
        self,
        scenarios: list[str],
        context: StorefrontContext,
        workers: int,
        headless: bool,
        db: Session,
        triggered_by: str = "manual",
    ):
        self.scenarios = scenarios
        self.context = context
        self.workers = workers
        self.headless = headless
        self.db = db
        self.triggered_by = triggered_by
        self.suite_run_id = None
        self.log_handler = None
        self.log_file = None

    async def run(self) -> SuiteRun:
        """Uruchamia wszystkie scenariusze i zwraca suite_run z wynikami."""

        suite_run = SuiteRun(
            base_url=self.context.base_url,
            status=SuiteRunStatus.RUNNING,
            started_at=datetime.now(timezone.utc),
            triggered_by=self.triggered_by,
            total_scenarios=len(self.scenarios),
        )
        self.db.add(suite_run)
        self.db.commit()
        self.db.refresh(suite_run)

        self.suite_run_id = suite_run.id
        self._setup_logging()

        logger.info(f"\n{'='*60}")
        logger.info(f"[SUITE RUN #{suite_run.id}] {self.context.base_url}")
        logger.info(f"Scenariusze: {len(self.scenarios)} | Workers: {self.workers}")
        logger.info(f"{'='*60}\n")

        semaphore = asyncio.Semaphore(self.workers)

        async def run_with_limit(scenario_name: str) -> dict:
            async with semaphore:
                # Każdy worker ma własną sesję — Session nie jest współdzielona między taskami
                db_session = Session(bind=self.db.bind)
                try:
                    executor = self._make_executor(scenario_name, suite_run.id, db_session)
                    run = await executor.run()
                    return {'scenario': scenario_name, 'status': run.status.value}

                except Exception as e:
                    logger.error(f"Blad w scenariuszu {scenario_name}: {e}")
                    self._write_raw_traceback(scenario_name, e)
                    return {'scenario': scenario_name, 'status': 'failed'}
                finally:
                    db_session.close()

        try:
            results = await asyncio.gather(*(run_with_limit(s) for s in self.scenarios))
            self._finalize_suite_run(suite_run, results)
        except asyncio.CancelledError:
            suite_run.status = SuiteRunStatus.CANCELLED
            suite_run.finished_at = datetime.now(timezone.utc)
            self.db.commit()
            logger.info(f"[SUITE RUN #{suite_run.id}] anulowany")
            raise
        finally:
            if self.log_handler:
                logging.getLogger().removeHandler(self.log_handler)
                self.log_handler.close()

        return suite_run

    def _make_executor(self, scenario_name: str, suite_run_id: int, db: Session) -> ScenarioExecutor:
        return ScenarioExecutor(
            scenario_name=scenario_name,
            context=self.context,
            suite_run_id=suite_run_id,
            db=db,
            headless=self.headless,
        )

    def _write_raw_traceback(self, scenario_name: str, exception: Exception):
        if not self.log_file:
            return
        try:
            tb_lines = traceback.format_exception(type(exception), exception, exception.__traceback__)
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write('=' * 80 + '\n')
                f.write(f'ERROR in scenario: {scenario_name}\n')
                f.write('=' * 80 + '\n')
                f.write(''.join(tb_lines))
                f.write('=' * 80 + '\n\n')
        except OSError as e:
            logger.error(f"Failed to write traceback: {e}")

    def _setup_logging(self):
        log_dir = Path(self.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = log_dir / f"suite_run_{self.suite_run_id}.log"
        self.log_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        self.log_handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter('%(asctime)s | %(levelname)-8s | %(message)s', datefmt='%H:%M:%S')
        self.log_handler.setFormatter(formatter)
        logging.getLogger().addHandler(self.log_handler)

    def _finalize_suite_run(self, suite_run: SuiteRun, results: list[dict]):
        success = sum(1 for r in results if r['status'] == 'success')
        failed  = len(results) - success

        suite_run.success_scenarios = success
        suite_run.failed_scenarios  = failed
        suite_run.finished_at       = datetime.now(timezone.utc)

        if failed == 0:
            suite_run.status = SuiteRunStatus.SUCCESS
        elif success == 0:
            suite_run.status = SuiteRunStatus.FAILED
        else:
            suite_run.status = SuiteRunStatus.PARTIAL

        self.db.commit()

        logger.info(f"\n{'='*60}")
        logger.info(f"[SUITE RUN #{suite_run.id}] COMPLETED")
        logger.info(f"Status: {suite_run.status.value.upper()}")
        logger.info(f"Success: {success} | Failed: {failed}")
        logger.info(f"Duration: {suite_run.duration_seconds}s")
        logger.info(f"{'='*60}\n")
