"""
(C) Copyright 2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import logging
import pytest

from typing import Generator  # pylint: disable=unused-import

from . import FakeServer

_log = logging.getLogger("pyneo4jhttptest")


@pytest.fixture
def server():
    # type: () -> FakeServer
    """A fresh scripted server for each test."""
    return FakeServer()


@pytest.fixture(autouse=True)
def reset_registry():
    # type: () -> Generator[None, None, None]
    """Leave the scheme registry as it was found."""
    import pyneo4jhttp
    yield
    pyneo4jhttp.reset()
