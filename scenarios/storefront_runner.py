"""
StorefrontRunner — główny orkiestrator scenariusza.
Odpowiedzialności:
  1. Uruchamia etapy scenariusza w odpowiedniej kolejności
  2. Robi screenshot po każdym etapie
  3. Obsługuje zatrzymanie testu (StopTest)
  4. Zapamiętuje etap, na którym scenariusz się wyłożył
"""
import logging
from dataclasses import dataclass, field

from playwright.async_api import Page

from pages import AccountPage, CheckoutPage, LoginPage, ProductPage
from scenarios.context import StorefrontContext
from scenarios.run_data import CheckoutData, LoginData, ProductData, RunData

logger = logging.getLogger(__name__)


# Scenariusz → lista etapów (metody _run_<etap>)
SCENARIOS: dict[str, list[str]] = {
    'login_authed': [
        'login', 'account',
    ],
    'checkout_card': [
        'login', 'add_to_cart', 'billing', 'card', 'place_order', 'order_received',
    ],
    'checkout_declined_card': [
        'login', 'add_to_cart', 'billing', 'declined_card', 'submit_payment', 'card_error',
    ],
}


@dataclass
class StorefrontRunResult:
    scenario: str
    run_data: RunData
    success: bool = True
    stopped_at: str | None = None
    error: str | None = None
    screenshots: dict[str, str] = field(default_factory=dict)  # stage → file path


class StopTest(Exception):
    """
    Rzucane gdy test ma się zatrzymać.
    expected=True  → stop był oczekiwany
    expected=False → stop oznacza błąd (np. produkt nie trafił do koszyka)
    """
    def __init__(self, stage: str, reason: str, expected: bool = True):
        super().__init__(reason)
        self.stage = stage
        self.reason = reason
        self.expected = expected


class StorefrontRunner:
    def __init__(self, page: Page, context: StorefrontContext, screenshot_dir: str | None = None):
        self.page = page
        self.context = context
        self.run_data = RunData()
        self.screenshot_dir = screenshot_dir
        self.screenshots: dict[str, str] = {}
        self._current_stage = 'init'

    # ── Helpers ───────────────────────────────────────────────────────────────

    async def _screenshot(self, stage: str) -> None:
        if not self.screenshot_dir:
            return
        path = f"{self.screenshot_dir}/{stage}.png"
        try:
            await self.page.screenshot(path=path)
            self.screenshots[stage] = path
        except Exception as e:
            # screenshot nie może przerwać runu
            logger.debug(f"Screenshot '{stage}' nieudany: {e}")

    def _result(self, scenario: str, **kwargs) -> StorefrontRunResult:
        return StorefrontRunResult(
            scenario=scenario,
            run_data=self.run_data,
            screenshots=self.screenshots,
            **kwargs,
        )

    @property
    def _checkout(self) -> CheckoutData:
        if self.run_data.checkout is None:
            self.run_data.checkout = CheckoutData()
        return self.run_data.checkout

    # ── Publiczne API ─────────────────────────────────────────────────────────

    async def run(self, scenario: str) -> StorefrontRunResult:
        if scenario not in SCENARIOS:
            raise ValueError(f"Nieznany scenariusz: {scenario}")

        try:
            for stage in SCENARIOS[scenario]:
                self._current_stage = stage
                await getattr(self, f"_run_{stage}")()
                await self._screenshot(stage)

        except StopTest as e:
            if e.expected:
                logger.info(f"[{scenario}] Test zatrzymany na '{e.stage}': {e.reason}")
            else:
                logger.warning(f"[{scenario}] Test przerwany na '{e.stage}' (nieoczekiwane): {e.reason}")
                await self._screenshot(f"{e.stage}_failed")
            return self._result(
                scenario,
                success=e.expected,
                stopped_at=e.stage,
                error=None if e.expected else e.reason,
            )

        except Exception as e:
            logger.exception(f"[{scenario}] Błąd na etapie '{self._current_stage}': {e}")
            await self._screenshot(f"{self._current_stage}_failed")
            return self._result(
                scenario,
                success=False,
                stopped_at=self._current_stage,
                error=str(e),
            )

        return self._result(scenario, success=True)

    # ── Etapy ─────────────────────────────────────────────────────────────────

    async def _run_login(self):
        login_page = LoginPage(self.page)
        await login_page.open(self.context.login_url)
        await login_page.login(self.context.username, self.context.password)
        await login_page.wait_for_load()
        self.run_data.login = LoginData(logged_in=True)

    async def _run_account(self):
        # Ponowne wejście na /login/ dla zalogowanego pokazuje panel konta
        account_page = AccountPage(self.page)
        await account_page.navigate(self.context.login_url)
        await account_page.expect_logged_in(self.context.display_name)
        self.run_data.login.account_verified = True

    async def _run_add_to_cart(self):
        product_page = ProductPage(self.page)
        await product_page.open(self.context.product_url)
        details = await product_page.get_product_details()
        added = await product_page.add_to_cart()

        self.run_data.product = ProductData(
            name=details["name"],
            price=details["price"],
            url=details["url"],
            added_to_cart=added,
        )
        if not added:
            raise StopTest('add_to_cart', 'Produkt nie trafił do koszyka', expected=False)

        await product_page.go_to_checkout(self.context.base_url)

    async def _run_billing(self):
        await CheckoutPage(self.page).fill_checkout_form(**self.context.billing.as_form())
        self._checkout.billing_filled = True

    async def _run_card(self):
        card = self.context.card
        await CheckoutPage(self.page).fill_card_details(card.number, card.expiry, card.cvc)
        self._checkout.card_filled = True

    async def _run_declined_card(self):
        card = self.context.declined_card
        await CheckoutPage(self.page).fill_card_details(card.number, card.expiry, card.cvc)
        self._checkout.card_filled = True

    async def _run_place_order(self):
        self._checkout.order_signal = await CheckoutPage(self.page).place_order()

    async def _run_submit_payment(self):
        await CheckoutPage(self.page).submit_order()

    async def _run_order_received(self):
        checkout_page = CheckoutPage(self.page)
        await checkout_page.expect_order_received()
        self._checkout.order_received = True
        self._checkout.order_number = await checkout_page.get_order_number()

    async def _run_card_error(self):
        await CheckoutPage(self.page).expect_card_error(self.context.declined_message)
        self._checkout.card_error = self.context.declined_message
