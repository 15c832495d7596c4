import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.models import Base
from scenarios.context import StorefrontContext
from tests.fakes import FakePage


@pytest.fixture
def fake_page():
    return FakePage()


@pytest.fixture
def context():
    return StorefrontContext(
        base_url="https://shop.test",
        username="automation",
        password="secret",
    )


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'runs.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
async def browser_page():
    """Prawdziwa strona Chromium — test jest pomijany gdy przeglądarka niedostępna."""
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch()
        except PlaywrightError as e:
            pytest.skip(f"Chromium niedostępny: {e}")
        page = await browser.new_page()
        try:
            yield page
        finally:
            await browser.close()
