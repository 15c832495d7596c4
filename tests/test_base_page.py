import re
from pathlib import Path

from pages.base_page import BasePage


class TestCaptureScreenshot:
    async def test_file_name_uses_millisecond_utc_timestamp(self, fake_page, tmp_path):
        base = BasePage(fake_page)
        base.SCREENSHOT_DIR = str(tmp_path / "screenshots")

        path = await base.capture_screenshot("checkout")

        assert fake_page.screenshots == [path]
        assert (tmp_path / "screenshots").is_dir()
        assert re.fullmatch(
            r"checkout-\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z\.png",
            Path(path).name,
        )
