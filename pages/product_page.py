import logging

from playwright.async_api import Error as PlaywrightError

from pages.base_page import BasePage

logger = logging.getLogger(__name__)


class ProductPage(BasePage):
    """
    Strona produktu WooCommerce — dodanie do koszyka i przejście do checkoutu.
    Ta klasa TYLKO obsługuje stronę, nie ocenia wyniku.
    """

    PRODUCT_TITLE  = '.product_title'
    PRODUCT_PRICE  = '.summary .price .woocommerce-Price-amount'
    ADD_TO_CART    = 'button[name="add-to-cart"], button.single_add_to_cart_button'
    ADDED_MESSAGE  = '.woocommerce-message'
    CHECKOUT_PATH  = '/checkout/'

    ADDED_TIMEOUT_MS = 15_000

    async def open(self, url: str):
        await self.navigate(url)
        await self.wait_for_load()

    async def get_product_details(self) -> dict:
        title = await self.get_text_content(self.PRODUCT_TITLE)
        return {
            "name": title.strip() if title else None,
            "price": await self.get_decimal(self.PRODUCT_PRICE),
            "url": self.page.url,
        }

    async def add_to_cart(self) -> bool:
        """Zwraca True jeśli sklep potwierdził dodanie do koszyka."""
        button = self.loc(self.ADD_TO_CART).first
        if not await button.is_visible():
            logger.warning("Przycisk 'Add to cart' nie jest widoczny")
            return False

        await button.click()
        await self.wait_for_load()

        # AJAX add-to-cart renderuje komunikat po DOMContentLoaded
        success = await self._wait_for_added_message()
        if success:
            self.log("Produkt dodany do koszyka")
        else:
            logger.warning("Nie udało się potwierdzić dodania do koszyka")
        return success

    async def go_to_checkout(self, base_url: str):
        await self.navigate(f"{base_url.rstrip('/')}{self.CHECKOUT_PATH}")
        await self.wait_for_load()

    async def _wait_for_added_message(self) -> bool:
        try:
            await self.loc(self.ADDED_MESSAGE).first.wait_for(state="visible", timeout=self.ADDED_TIMEOUT_MS)
            return True
        except PlaywrightError:
            return False
