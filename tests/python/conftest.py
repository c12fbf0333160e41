"""
Pytest configuration and shared fixtures for bindgen tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from bindgen import log
from bindgen.engine import Bindings
from bindgen.errors import GenerationError


# Try to load libclang - if it fails, skip tests that require it
try:
    from clang.cindex import Index
    Index.create()
    HAS_CLANG = True
except Exception as e:
    HAS_CLANG = False
    CLANG_ERROR = str(e)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def requires_clang():
    """Skip test if libclang is not available."""
    if not HAS_CLANG:
        pytest.skip(f"libclang not available: {CLANG_ERROR}")


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch):
    """Give every test a fresh, unconfigured bindgen logger."""
    monkeypatch.delenv(log.LOG_ENV_VAR, raising=False)
    yield
    for handler in list(log.logger.handlers):
        log.logger.removeHandler(handler)
    log.logger.setLevel(logging.NOTSET)
    log._initialized = False


class FakeBuilder:
    """Stands in for the engine; records every configuration it receives."""

    def __init__(self, text="pub fn foo();\n", fail=False):
        self.text = text
        self.fail = fail
        self.configs = []

    def __call__(self, config):
        self.configs.append(config)
        return self

    def generate(self):
        if self.fail:
            raise GenerationError()
        return Bindings(self.text)


@pytest.fixture
def fake_builder():
    """Engine that returns fixed bindings."""
    return FakeBuilder()


@pytest.fixture
def failing_builder():
    """Engine whose generation fails."""
    return FakeBuilder(fail=True)


@pytest.fixture
def sample_header(tmp_path):
    """Write a small C header and return its path."""
    header = tmp_path / "foo.h"
    header.write_text(
        """
#define FOO_SIZE 16
#define FOO_NAME "foo"
#define FOO_MAX(a, b) ((a) > (b) ? (a) : (b))

typedef struct {
    int x;
    double y;
} foo_point;

struct foo_node;

enum foo_color { FOO_RED, FOO_GREEN = 5 };

typedef void (*foo_cb)(int code, void *data);

int foo_init(const char *name, struct foo_node *node);

extern int foo_count;
"""
    )
    return header
