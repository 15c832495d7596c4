from pages.base_page import BasePage, Selector, StorefrontPageError
import logging
import re

logger = logging.getLogger(__name__)


class LoginPage(BasePage):
    """
    Strona logowania sklepu (Ultimate Member na WooCommerce).
    Markup formularza zmienia się między wdrożeniami, więc każde pole
    ma listę kandydatów sprawdzanych po kolei.
    """

    USERNAME_ID = '#username-92'
    PASSWORD_ID = '#user_password-92'
    LOGIN_BUTTON_ID = '#um-submit-btn'

    # Kolejność ma znaczenie: label → placeholder → atrybut name → stałe ID
    USERNAME_CANDIDATES: list[Selector] = [
        ('label', 'Username'),
        ('placeholder', 'Username'),
        'input[name="username"]',
        USERNAME_ID,
    ]
    PASSWORD_CANDIDATES: list[Selector] = [
        ('label', 'Password'),
        ('placeholder', 'Password'),
        'input[name="password"]',
        PASSWORD_ID,
    ]
    LOGIN_BUTTON = ('role', 'button', {'name': re.compile(r'log in|login|sign in', re.I)})

    async def open(self, url: str):
        await self.navigate(url)
        await self.wait_for_load()

    async def login(self, username: str, password: str):
        if not await self._try_fill(self.USERNAME_CANDIDATES, username):
            raise StorefrontPageError("Unable to find username field")

        if not await self._try_fill(self.PASSWORD_CANDIDATES, password):
            raise StorefrontPageError("Unable to find password field")

        await self._submit()

    async def _try_fill(self, candidates: list[Selector], value: str) -> bool:
        """
        Wypełnia pierwszy kandydat, który istnieje na stronie.
        Błędy przy sondowaniu są ignorowane, próbujemy następnego.
        """
        for candidate in candidates:
            try:
                locator = self.loc(candidate)
                if await locator.count() > 0:
                    await locator.fill(value)
                    logger.debug(f"[LoginPage] Wypełniono pole przez {candidate!r}")
                    return True
            except Exception as e:
                logger.debug(f"[LoginPage] Kandydat {candidate!r} odrzucony: {e}")
        return False

    async def _submit(self):
        try:
            button = self.loc(self.LOGIN_BUTTON).first
            if await button.count() > 0:
                await button.click()
                return
        except Exception as e:
            logger.debug(f"[LoginPage] Przycisk po roli niedostępny: {e}")

        self.log(f"Brak przycisku po roli — klikam {self.LOGIN_BUTTON_ID}")
        await self.click_element(self.LOGIN_BUTTON_ID)
