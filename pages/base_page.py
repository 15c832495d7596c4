from datetime import datetime, timezone
from pathlib import Path
from typing import Union
import logging
import re

from playwright.async_api import Frame, Locator, Page, expect

logger = logging.getLogger(__name__)

# CSS string albo tuple: ('label', 'Username'), ('role', 'button', {'name': ...})
Selector = Union[str, tuple]


class StorefrontPageError(Exception):
    """Rzucane gdy wszystkie warianty selektorów zawiodły."""


class BasePage:
    """
    Klasa bazowa dla wszystkich Page Objects.
    Playwright jest TYLKO tutaj i w klasach dziedziczacych.
    """

    SCREENSHOT_DIR = "screenshots"

    def __init__(self, page: Page):
        self.page = page

    # ── Lokator ───────────────────────────────────────────────────────────────

    def loc(self, selector: Selector, scope: Page | Frame | None = None) -> Locator:
        """
        Interpretuje selektor i zwraca Playwright Locator.
        scope — strona albo ramka (iframe), domyślnie self.page.

        Formaty:
          'css_or_xpath'
          ('locator',      'css_or_xpath')
          ('role',         'button',       {'name': 'Log in'})
          ('text',         'Order received', {'exact': True})
          ('test_id',      'place-order')
          ('label',        'Username')
          ('placeholder',  'Password')
        """
        target = scope or self.page

        if isinstance(selector, str):
            return target.locator(selector)

        kind = selector[0]
        kwargs = selector[2] if len(selector) > 2 else {}

        if kind == 'locator':
            return target.locator(selector[1])
        elif kind == 'role':
            return target.get_by_role(selector[1], **kwargs)
        elif kind == 'text':
            return target.get_by_text(selector[1], **kwargs)
        elif kind == 'test_id':
            return target.get_by_test_id(selector[1])
        elif kind == 'label':
            return target.get_by_label(selector[1], **kwargs)
        elif kind == 'placeholder':
            return target.get_by_placeholder(selector[1], **kwargs)
        else:
            raise ValueError(f"Nieznany typ selektora: {kind}")

    # ── Akcje ─────────────────────────────────────────────────────────────────

    async def type_into_locator(self, locator: Selector, value: str):
        await self.loc(locator).press_sequentially(value, delay=100)

    async def click_element(self, locator: Selector, timeout: int = 25000):
        await self.loc(locator).click(timeout=timeout)

    async def fill_form(self, fields: dict[Selector, str]):
        """Wpisuje wartości w kolejności słownika: {lokator: wartość}."""
        for locator, value in fields.items():
            await self.type_into_locator(locator, value)

    async def navigate(self, url: str):
        self.log(f"Przechodzę na: {url}")
        await self.page.goto(url)

    async def wait_for_load(self):
        """
        Czeka az strona sie zaladuje.
        Uzywamy domcontentloaded zamiast networkidle, sklep z widgetem
        Stripe trzyma otwarte polaczenia i networkidle moze nie nastapic.
        """
        await self.page.wait_for_load_state("domcontentloaded")

    # ── Weryfikacje ───────────────────────────────────────────────────────────

    async def verify_text(self, locator: Selector, expected_text: str, exact: bool = False):
        loc = self.loc(locator).first
        if exact:
            await expect(loc).to_have_text(expected_text)
        else:
            await expect(loc).to_contain_text(expected_text)

    async def verify_text_with_options(
        self,
        locator: Selector,
        expected_text: str,
        exact: bool = False,
        normalize_whitespace: bool = True,
        timeout: int = 5000,
    ):
        loc = self.loc(locator).first

        if normalize_whitespace:
            pattern = re.sub(r"\s+", r"\\s+", expected_text)
            await expect(loc).to_have_text(re.compile(pattern), timeout=timeout)
        elif exact:
            await expect(loc).to_have_text(expected_text, timeout=timeout)
        else:
            await expect(loc).to_contain_text(expected_text, timeout=timeout)

    async def verify_element_visible(self, locator: Selector, timeout: int = 25000):
        await expect(self.loc(locator).first).to_be_visible(timeout=timeout)

    # ── Odczyt ────────────────────────────────────────────────────────────────

    async def get_text_content(self, locator: Selector) -> str | None:
        return await self.loc(locator).first.text_content()

    async def get_decimal(self, locator: Selector) -> float | None:
        text = await self.get_text_content(locator)
        if not text:
            return None
        cleaned = re.sub(r"[^\d,.]", "", text).replace(",", ".")
        try:
            return float(cleaned)
        except ValueError:
            return None

    async def is_visible(self, locator: Selector) -> bool:
        try:
            return await self.loc(locator).first.is_visible()
        except Exception:
            return False

    # ── Screenshoty ───────────────────────────────────────────────────────────

    async def capture_screenshot(self, name: str, full_page: bool = False) -> str:
        iso = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        timestamp = re.sub(r"[:.]", "-", iso)
        Path(self.SCREENSHOT_DIR).mkdir(parents=True, exist_ok=True)
        path = f"{self.SCREENSHOT_DIR}/{name}-{timestamp}.png"
        await self.page.screenshot(path=path, full_page=full_page)
        logger.info(f"Screenshot zapisany: {path}")
        return path

    def log(self, msg: str):
        logger.info(f"[{self.__class__.__name__}] {msg}")
