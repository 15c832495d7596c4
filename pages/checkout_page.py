import asyncio
import logging
import time

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Frame, expect

from pages.base_page import BasePage, Selector, StorefrontPageError

logger = logging.getLogger(__name__)


# ── CheckoutPage — formularz WooCommerce + karta Stripe ──────────────────────

class CheckoutPage(BasePage):
    BILLING_FIRST_NAME = '#billing_first_name'
    BILLING_LAST_NAME  = '#billing_last_name'
    BILLING_COMPANY    = '#billing_company'
    BILLING_ADDRESS_1  = '#billing_address_1'
    BILLING_ADDRESS_2  = '#billing_address_2'
    BILLING_CITY       = '#billing_city'
    BILLING_POSTCODE   = '#billing_postcode'
    BILLING_PHONE      = '#billing_phone'
    BILLING_EMAIL      = '#billing_email'
    PLACE_ORDER        = '#place_order'
    ORDER_NUMBER       = '.woocommerce-order-overview__order strong'

    ORDER_RECEIVED_HEADING = ('role', 'heading', {'name': 'Order received'})
    THANK_YOU_TEXT         = ('text', 'Thank you. Your order has been received.')

    # Stripe Elements osadza pola karty w iframe o nazwie __privateStripeFrameNNNN
    STRIPE_IFRAME = 'iframe[name^="__privateStripeFrame"]'
    CARD_NUMBER_PLACEHOLDER = 'input[placeholder="1234 1234 1234 1234"]'
    CARD_NUMBER_NAME        = 'input[name="cardnumber"]'

    # Dwa znane kształty DOM pól Stripe: (numer, data ważności, cvc)
    CARD_FIELD_ATTEMPTS: list[tuple[str, str, str]] = [
        (
            CARD_NUMBER_PLACEHOLDER,
            'input[placeholder="MM / YY"]',
            'input[placeholder="CVC"]',
        ),
        (
            CARD_NUMBER_NAME,
            'input[name="exp-date"]',
            'input[name="cvc"]',
        ),
    ]

    ORDER_TIMEOUT_MS      = 60_000
    CARD_FRAME_TIMEOUT_MS = 90_000
    CARD_ERROR_TIMEOUT_MS = 60_000
    POLL_INTERVAL_MS      = 500

    # ── Formularz ─────────────────────────────────────────────────────────────

    async def fill_checkout_form(
        self,
        first_name: str,
        last_name: str,
        company: str,
        street_address: str,
        apartment: str,
        town_city: str,
        postcode: str,
        phone: str,
        email: str,
    ):
        await self.fill_form({
            self.BILLING_FIRST_NAME: first_name,
            self.BILLING_LAST_NAME:  last_name,
            self.BILLING_COMPANY:    company,
            self.BILLING_ADDRESS_1:  street_address,
            self.BILLING_ADDRESS_2:  apartment,
            self.BILLING_CITY:       town_city,
            self.BILLING_POSTCODE:   postcode,
            self.BILLING_PHONE:      phone,
            self.BILLING_EMAIL:      email,
        })

    # ── Zamówienie ────────────────────────────────────────────────────────────

    async def place_order(self) -> str | None:
        """
        Klika "Place order" i czeka na pierwszy z sygnałów: nawigację,
        nagłówek "Order received" albo tekst podziękowania.
        Zwraca nazwę sygnału, który przyszedł, lub None gdy pierwszy
        zakończony waiter skończył się timeoutem.
        """
        # Waitery startują przed kliknięciem, żeby nie przegapić szybkiej nawigacji
        tasks = {
            asyncio.create_task(self._wait_for_navigation()): 'navigation',
            asyncio.create_task(self._wait_for_visible(self.ORDER_RECEIVED_HEADING)): 'heading',
            asyncio.create_task(self._wait_for_visible(self.THANK_YOU_TEXT)): 'thank_you',
        }

        try:
            await self.submit_order()
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for task in done:
            if not task.cancelled() and task.result():
                signal = tasks[task]
                self.log(f"Zamówienie złożone — sygnał: {signal}")
                return signal

        logger.warning("[CheckoutPage] Brak potwierdzenia zamówienia w limicie czasu")
        return None

    async def submit_order(self):
        await self.click_element(self.PLACE_ORDER)

    async def _wait_for_navigation(self) -> bool:
        try:
            await self.page.wait_for_event(
                "framenavigated",
                predicate=lambda frame: frame == self.page.main_frame,
                timeout=self.ORDER_TIMEOUT_MS,
            )
            await self.page.wait_for_load_state("load", timeout=self.ORDER_TIMEOUT_MS)
            return True
        except PlaywrightError:
            return False

    async def _wait_for_visible(self, selector: Selector) -> bool:
        try:
            await self.loc(selector).first.wait_for(state="visible", timeout=self.ORDER_TIMEOUT_MS)
            return True
        except PlaywrightError:
            return False

    async def expect_order_received(self):
        await expect(self.loc(self.ORDER_RECEIVED_HEADING)).to_be_visible()
        await expect(self.loc(self.THANK_YOU_TEXT)).to_be_visible()

    async def get_order_number(self) -> str | None:
        if await self.loc(self.ORDER_NUMBER).count() == 0:
            return None
        text = await self.get_text_content(self.ORDER_NUMBER)
        return text.strip() if text else None

    # ── Karta Stripe ──────────────────────────────────────────────────────────

    async def fill_card_details(self, card_number: str, expiry_date: str, cvc: str):
        card_frame = await self._find_card_frame()

        last_error: Exception | None = None
        for number_sel, expiry_sel, cvc_sel in self.CARD_FIELD_ATTEMPTS:
            try:
                await card_frame.locator(number_sel).fill(card_number)
                await card_frame.locator(expiry_sel).fill(expiry_date)
                await card_frame.locator(cvc_sel).fill(cvc)
                self.log(f"Dane karty wpisane przez {number_sel}")
                return
            except Exception as e:
                logger.debug(f"[CheckoutPage] Próba {number_sel} nieudana: {e}")
                last_error = e

        raise StorefrontPageError(f"Failed to fill card details in Stripe frame: {last_error}")

    async def _find_card_frame(self) -> Frame:
        """
        Odpytuje ramki co POLL_INTERVAL_MS aż znajdzie pola karty.
        Najpierw bezpośrednie iframe Stripe, potem wszystkie ramki strony.
        """
        deadline = time.monotonic() + self.CARD_FRAME_TIMEOUT_MS / 1000

        while time.monotonic() < deadline:
            for frame in await self._candidate_frames():
                try:
                    if await self._is_card_frame(frame):
                        return frame
                except Exception as e:
                    # cross-origin / odłączona ramka — szukamy dalej
                    logger.debug(f"[CheckoutPage] Ramka niedostępna: {e}")
            await self.page.wait_for_timeout(self.POLL_INTERVAL_MS)

        raise StorefrontPageError("Unable to find Stripe card frame within timeout")

    async def _candidate_frames(self) -> list[Frame]:
        frames = []
        try:
            for handle in await self.page.locator(self.STRIPE_IFRAME).element_handles():
                try:
                    frame = await handle.content_frame()
                finally:
                    await handle.dispose()
                if frame is not None:
                    frames.append(frame)
        except Exception as e:
            logger.debug(f"[CheckoutPage] Bezpośredni iframe Stripe niedostępny: {e}")

        frames.extend(f for f in self.page.frames if f not in frames)
        return frames

    async def _is_card_frame(self, frame: Frame) -> bool:
        has_placeholder = await frame.locator(self.CARD_NUMBER_PLACEHOLDER).count() > 0
        has_name_inputs = await frame.locator(self.CARD_NUMBER_NAME).count() > 0
        return has_placeholder or has_name_inputs

    async def expect_card_error(self, message: str):
        """Szuka komunikatu błędu karty na stronie, a potem w ramkach Stripe."""
        try:
            page_message = self.page.get_by_text(message)
            if await page_message.count() > 0:
                await expect(page_message.first).to_be_visible()
                return
        except Exception as e:
            logger.debug(f"[CheckoutPage] Komunikat poza stroną główną: {e}")

        deadline = time.monotonic() + self.CARD_ERROR_TIMEOUT_MS / 1000

        while time.monotonic() < deadline:
            for frame in self.page.frames:
                try:
                    frame_message = frame.get_by_text(message)
                    if await frame_message.count() > 0:
                        await expect(frame_message.first).to_be_visible()
                        self.log(f"Komunikat błędu karty znaleziony: {message}")
                        return
                except Exception as e:
                    logger.debug(f"[CheckoutPage] Ramka niedostępna: {e}")
            await self.page.wait_for_timeout(self.POLL_INTERVAL_MS)

        raise StorefrontPageError(f"Card error message not found: {message}")
