"""Test version information."""

import consolidate


def test_version() -> None:
    """Test that version is accessible."""
    assert hasattr(consolidate, "__version__")
    assert isinstance(consolidate.__version__, str)
    assert consolidate.__version__ == "0.1.0"
