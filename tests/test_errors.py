"""Tests for tealeaf._errors."""

from tealeaf._errors import (
    ConfigError,
    ConstructionError,
    PathResolutionError,
    RegistryMissingError,
    TealeafError,
)


class TestErrorHierarchy:
    """All tealeaf errors inherit from TealeafError."""

    def test_tealeaf_error_is_exception(self) -> None:
        assert issubclass(TealeafError, Exception)

    def test_registry_missing_is_config_error(self) -> None:
        assert issubclass(RegistryMissingError, ConfigError)

    def test_catch_all_tealeaf_errors(self) -> None:
        """All specific errors are catchable via TealeafError."""
        for error in (
            ConfigError("test"),
            ConstructionError("test"),
            RegistryMissingError("test"),
            PathResolutionError("x", ("x",), {}),
        ):
            try:
                raise error
            except TealeafError:
                pass  # Expected — all caught by base class


class TestPathResolutionError:
    """Context carried by path failures."""

    def test_attributes_and_message(self) -> None:
        error = PathResolutionError("name", ("user", "name"), {"age": 3})
        assert error.segment == "name"
        assert error.path == ("user", "name")
        assert error.value == {"age": 3}
        assert "{'age': 3}" in str(error)
        assert "user.name" in str(error)
