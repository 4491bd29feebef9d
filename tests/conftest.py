"""
Shared fixtures

Every test gets a fresh DeferredQueue installed as the default queue and the
default configuration, so futures created without queue= are isolated.
"""

import pytest

from thenable import DeferredQueue, get_default_config, set_config, set_default_queue


@pytest.fixture(autouse=True)
def queue():
    """Fresh default queue, drained explicitly by the test"""
    set_config(get_default_config())
    fresh = DeferredQueue()
    set_default_queue(fresh)
    yield fresh
    set_default_queue(None)
    set_config(get_default_config())


@pytest.fixture
def drain(queue):
    """Run every pending callback, including ones scheduled while draining"""

    def _drain() -> int:
        return queue.run_until_idle()

    return _drain
