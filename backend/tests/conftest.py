"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend to avoid sandbox restrictions
that can affect the Trio backend (e.g., socketpair permission errors), and
give every test a clean session store and a dev environment.
"""
import importlib
import sys
from pathlib import Path

import pytest

# Ensure modules in backend/ and backend/web are importable across tests
REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = REPO_ROOT / "backend"
WEB_DIR = BACKEND_DIR / "web"
TESTS_DIR = BACKEND_DIR / "tests"
for p in (str(REPO_ROOT), str(BACKEND_DIR), str(WEB_DIR), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _dev_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep startup checks permissive unless a test opts into prod."""
    monkeypatch.setenv("JOBBOARD_ENV", "dev")
    monkeypatch.delenv("AUTH_API_BASE_URL", raising=False)
    monkeypatch.delenv("AUTH_TOKEN_EXPIRE_HOURS", raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_session_store():
    """
    Replace the shared `main.SESSION_STORE` before each test case.

    Why:
        Web tests share the singleton; sessions created by one test must not
        leak into the next. Only runs when `main` is already imported, so pure
        unit tests never pay for building the app.
    """
    mod = sys.modules.get("main")
    if mod is not None:
        from identity_access.stores import SessionStore

        mod.SESSION_STORE = SessionStore()
    yield


@pytest.fixture
def web_main():
    """Import (or reuse) the web app module with a fresh session store."""
    from identity_access.stores import SessionStore

    mod = importlib.import_module("main")
    mod.SESSION_STORE = SessionStore()
    return mod
