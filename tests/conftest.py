from __future__ import annotations

import pytest

from querygraph.catalog import discover_backends
from querygraph.host import HostSession


@pytest.fixture
def session(tmp_path):
    return HostSession(project_dir=tmp_path)


@pytest.fixture(scope="session")
def catalog():
    return discover_backends()
