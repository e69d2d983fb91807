"""Fixtures for the runnable kumi examples.

Every example directory holds an ``app.py`` that builds its own host and
registers its components at import time. ``example_app`` executes that
file into a new module object on every call, so each test gets a fresh
host and registry. The module name has no dots, which keeps convention
routes rooted at the example directory (``~/Card.html``).
Once the test finishes, the fixture checks that the example left no
render pass bound to the calling context.
"""

import importlib.util
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

import pytest

from kumi import get_render_pass


def load_app(app_path: Path, module_name: str) -> ModuleType:
    """Execute ``app_path`` as a new module named ``module_name``."""
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load example app from {app_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> Iterator[ModuleType]:
    """Fresh module from the app.py next to the requesting test."""
    app_dir = Path(request.path).parent
    module = load_app(app_dir / "app.py", f"kumi_example_{app_dir.name}")
    yield module
    assert get_render_pass() is None, f"{app_dir.name} left a render pass bound"
