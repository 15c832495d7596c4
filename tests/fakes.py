"""In-memory stand-ins for Playwright Page / Frame / Locator used by the unit tests."""

import asyncio

from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class FakeLocator:
    def __init__(self, key, journal, count=0, count_error=None, fill_error=None, appears_after=None, text=None):
        self.key = key
        self.journal = journal
        self._count = count
        self.count_error = count_error
        self.fill_error = fill_error
        self.appears_after = appears_after
        self.text = text
        self.handles = []
        self.filled = []
        self.typed = []
        self.clicks = []

    @property
    def first(self):
        return self

    async def count(self):
        if self.count_error:
            raise self.count_error
        return self._count

    async def fill(self, value):
        if self.fill_error:
            raise self.fill_error
        if self._count == 0:
            raise PlaywrightTimeoutError(f"Timeout waiting for {self.key}")
        self.filled.append(value)
        self.journal.append(("fill", self.key, value))

    async def press_sequentially(self, value, delay=None):
        self.typed.append((value, delay))
        self.journal.append(("type", self.key, value))

    async def click(self, timeout=None):
        self.clicks.append(timeout)
        self.journal.append(("click", self.key))

    async def is_visible(self):
        return self._count > 0

    async def text_content(self):
        return self.text

    async def wait_for(self, state="visible", timeout=None):
        if self.appears_after is None:
            await asyncio.sleep(timeout / 1000)
            raise PlaywrightTimeoutError(f"Timeout waiting for {self.key}")
        await asyncio.sleep(self.appears_after)

    async def element_handles(self):
        return self.handles


class FakeHandle:
    def __init__(self, frame):
        self.frame = frame
        self.disposed = False

    async def content_frame(self):
        return self.frame

    async def dispose(self):
        self.disposed = True


class FakeFrame:
    def __init__(self, name="frame", journal=None):
        self.name = name
        self.journal = journal if journal is not None else []
        self._locators = {}

    def add(self, key, **kwargs) -> FakeLocator:
        locator = FakeLocator(key, self.journal, **kwargs)
        self._locators[key] = locator
        return locator

    def _get(self, key) -> FakeLocator:
        if key not in self._locators:
            self._locators[key] = FakeLocator(key, self.journal)
        return self._locators[key]

    def locator(self, selector):
        return self._get(selector)

    def get_by_label(self, text, **kwargs):
        return self._get(("label", text))

    def get_by_placeholder(self, text, **kwargs):
        return self._get(("placeholder", text))

    def get_by_role(self, role, **kwargs):
        return self._get(("role", role))

    def get_by_text(self, text, **kwargs):
        return self._get(("text", text))

    def get_by_test_id(self, test_id):
        return self._get(("test_id", test_id))


class FakePage(FakeFrame):
    def __init__(self):
        super().__init__(name="main")
        self.child_frames = []
        self.timeouts = []
        self.screenshots = []
        self.visited = []
        self.url = "about:blank"
        self.navigates_after = None

    @property
    def frames(self):
        return [self, *self.child_frames]

    @property
    def main_frame(self):
        return self

    def add_frame(self, name) -> FakeFrame:
        frame = FakeFrame(name=name, journal=self.journal)
        self.child_frames.append(frame)
        return frame

    async def wait_for_timeout(self, timeout):
        self.timeouts.append(timeout)
        await asyncio.sleep(timeout / 1000)

    async def wait_for_event(self, event, predicate=None, timeout=None):
        if self.navigates_after is None or (predicate and not predicate(self.main_frame)):
            await asyncio.sleep(timeout / 1000)
            raise PlaywrightTimeoutError(f"Timeout waiting for {event}")
        await asyncio.sleep(self.navigates_after)
        return self.main_frame

    async def wait_for_load_state(self, state="load", timeout=None):
        return None

    async def goto(self, url):
        self.visited.append(url)
        self.url = url

    async def screenshot(self, path=None, full_page=False):
        self.screenshots.append(path)


class FakeExpectation:
    def __init__(self, locator):
        self.locator = locator

    async def to_be_visible(self):
        assert await self.locator.is_visible(), f"{self.locator.key} is not visible"


def fake_expect(locator):
    """`expect()` z Playwrighta przyjmuje tylko prawdziwe lokatory."""
    return FakeExpectation(locator)
