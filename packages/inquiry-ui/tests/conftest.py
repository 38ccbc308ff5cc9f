from __future__ import annotations

from typing import Iterator

import pytest

from inquiry.ui.config import Config, set_config
from inquiry.ui.keybindings import set_keybindings


@pytest.fixture(autouse=True)
def _reset_globals() -> Iterator[None]:
    """Isolate tests from INQUIRY_UI_* variables and from each other."""
    set_config(Config())
    set_keybindings(None)
    yield
    set_config(None)
    set_keybindings(None)
