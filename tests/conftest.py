import pytest


@pytest.fixture(autouse=True)
def _reset_store_registry():
    """Each test starts and ends without a process-wide store."""
    from src.store.registry import close_store
    close_store()
    yield
    close_store()
