from __future__ import annotations

import pytest

from timings import DEFAULT_SCOPES


@pytest.fixture(autouse=True)
def _no_leaked_scopes():
    """Fail a test that leaves frames on the shared scope stack.

    Operations must release their `OperationId` scope on every terminal path;
    a leaked frame would tag unrelated records in later tests.
    """
    assert len(DEFAULT_SCOPES) == 0
    yield
    assert DEFAULT_SCOPES.frames() == []
