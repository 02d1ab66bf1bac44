from __future__ import annotations

import sys

import pytest

from icecanary.reporting import PlainReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _fresh_reporter():
    # Reporters bind their stream at construction; rebind to the captured one.
    set_reporter(PlainReporter(stream=sys.stderr))
    set_verbosity(0)
    yield
    set_reporter(PlainReporter(stream=sys.__stderr__))
