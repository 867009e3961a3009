from __future__ import annotations

import pytest

from govanity.config import VanityConfig


@pytest.fixture()
def config() -> VanityConfig:
    return VanityConfig.model_validate(
        {
            "Base": "example.org",
            "Modules": {"util": "https://github.com/x/util"},
            "Fallback": "https://github.com/x/%",
            "SocketPath": "/nonexistent/govanity.sock",
        }
    )
