"""Basic tests to verify project setup."""


def test_import_doks_planner():
    """Test that doks_planner package can be imported."""
    import doks_planner

    assert doks_planner.__version__ == "0.1.0"


def test_import_cli():
    """Test that CLI module can be imported."""
    from doks_planner import cli

    assert cli.app is not None


def test_import_models():
    """Test that models module exports the public types."""
    from doks_planner import models

    assert models.ResourceIntent is not None
    assert models.ClusterInput is not None
    assert len(models.ADDON_NAMES) == 5
