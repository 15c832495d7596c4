from pages.base_page import BasePage

# ── AccountPage — widok zalogowanego użytkownika ─────────────────────────────


class AccountPage(BasePage):
    YOUR_ACCOUNT_LINK = ('role', 'link', {'name': 'Your account'})

    async def expect_logged_in(self, display_name: str, timeout: int = 25000):
        await self.verify_element_visible(('role', 'link', {'name': display_name}), timeout=timeout)
        await self.verify_element_visible(('text', display_name), timeout=timeout)
        await self.verify_element_visible(self.YOUR_ACCOUNT_LINK, timeout=timeout)
