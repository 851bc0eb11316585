import pytest


def test_reimport_guard() -> None:
    """
    Test that reimporting the submux module results in an ImportError,
    preventing developers from dropping the default registry by accident.
    """
    import importlib
    import submux

    with pytest.raises(
        ImportError,
        match="Module 'submux' has already been imported and cannot be reloaded",
    ):
        importlib.reload(submux)
