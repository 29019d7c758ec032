# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import pytest

from image_toggle.config import Config


@pytest.fixture(autouse=True)
def default_config():
    """Reset the configuration singleton around every test."""
    Config.load(None)
    yield Config()
    Config.load(None)
