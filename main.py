"""
Storefront Monitor
==================
Uruchamia scenariusze sklepu (logowanie, checkout, platnosc Stripe)
rownolegle z uzyciem asyncio i zapisuje wyniki do bazy.

Uzycie:
    python main.py                              # wszystkie scenariusze
    python main.py --scenario checkout_card     # TYLKO jeden scenariusz
    python main.py --workers 2                  # liczba rownoleglych przegladarek
    python main.py --base-url https://...       # inny sklep niz STOREFRONT_BASE_URL
    python main.py --headless                   # bez okna przegladarki
    python main.py --list                       # lista scenariuszy
"""

import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from database import SessionLocal, init_db
from scenarios.context import StorefrontContext
from scenarios.storefront_runner import SCENARIOS
from scenarios.suite_executor import SuiteExecutor

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 2


def setup_logging():
    Path("logs").mkdir(exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(
                f"logs/run_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log",
                encoding="utf-8"
            )
        ]
    )


def parse_args(argv: list[str]) -> dict:
    args = {
        "scenario": None,
        "workers": DEFAULT_WORKERS,
        "base_url": None,
        "headless": "--headless" in argv,
        "list": "--list" in argv,
    }

    if "--scenario" in argv:
        idx = argv.index("--scenario")
        args["scenario"] = argv[idx + 1]

    if "--workers" in argv:
        idx = argv.index("--workers")
        args["workers"] = int(argv[idx + 1])

    if "--base-url" in argv:
        idx = argv.index("--base-url")
        args["base_url"] = argv[idx + 1]

    return args


def select_scenarios(scenario: str | None) -> list[str]:
    """Jesli podano scenariusz — uruchamia TYLKO ten. Inaczej wszystkie."""
    if scenario is None:
        return list(SCENARIOS)

    if scenario not in SCENARIOS:
        logger.error(f"Scenariusz '{scenario}' nie istnieje. Dostepne: {', '.join(SCENARIOS)}")
        sys.exit(1)

    return [scenario]


async def run_suite(scenarios: list[str], context: StorefrontContext, workers: int, headless: bool) -> int:
    """Zwraca liczbe scenariuszy, ktore nie przeszly."""
    db = SessionLocal()
    try:
        executor = SuiteExecutor(
            scenarios=scenarios,
            context=context,
            workers=workers,
            headless=headless,
            db=db,
        )
        suite_run = await executor.run()
        return suite_run.failed_scenarios
    finally:
        db.close()


def main(argv: list[str]) -> int:
    args = parse_args(argv)

    if args["list"]:
        for name, stages in SCENARIOS.items():
            print(f"{name:<25} {' → '.join(stages)}")
        return 0

    setup_logging()
    init_db()

    scenarios = select_scenarios(args["scenario"])
    context = StorefrontContext.from_env(base_url=args["base_url"])

    if not context.username or not context.password:
        logger.warning("Brak STOREFRONT_USERNAME / STOREFRONT_PASSWORD — logowanie sie nie powiedzie")

    failed = asyncio.run(run_suite(scenarios, context, args["workers"], args["headless"]))
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
