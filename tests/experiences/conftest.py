import pytest


@pytest.fixture(scope="session")
def _experiences_domain():
    """Initialize the experiences domain once per session."""
    from experiences.domain import experiences

    experiences.init()
    return experiences


@pytest.fixture(scope="session", autouse=True)
def setup_db(_experiences_domain):
    from experiences.utils.db import drop_db, setup_db

    setup_db(_experiences_domain)

    yield

    drop_db(_experiences_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_experiences_domain):
    """Push domain context and seed the tag catalog before each test, cleanup after."""
    from experiences.tag.tag import seed_tag_catalog

    ctx = _experiences_domain.domain_context()
    ctx.push()
    seed_tag_catalog()

    yield

    from protean import current_domain

    from experiences.screening import reset_content_screen

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    reset_content_screen()
    ctx.pop()


@pytest.fixture()
def fake_screen(monkeypatch):
    """Swap in the fake content screen for the current test."""
    from experiences.screening import get_content_screen, reset_content_screen

    monkeypatch.setenv("CONTENT_SCREEN", "fake")
    reset_content_screen()
    yield get_content_screen()
    reset_content_screen()


@pytest.fixture()
def interview_id():
    from protean import current_domain

    from experiences.interview.registration import RegisterInterview

    return current_domain.process(
        RegisterInterview(company="Acme", role="Backend engineer", level="Senior", stage="Onsite"),
        asynchronous=False,
    )
