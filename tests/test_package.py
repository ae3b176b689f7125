"""
Tests for the top-level package exports.
"""

import wpoverflow


def test_version():
    assert wpoverflow.__version__ == "0.1.0"


def test_all_names_resolve():
    for name in wpoverflow.__all__:
        assert hasattr(wpoverflow, name), name
