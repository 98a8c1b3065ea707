"""Unit tests for the exception hierarchy."""

import pytest

from recordmark.cli.errors import CLIError, InputFileError
from recordmark.config.errors import ConfigError, ConfigurationError, FilesystemError
from recordmark.errors import ConversionError, PlaceholderError, RecordMarkError


class TestConversionErrors:
    """Test cases for conversion exceptions."""

    def test_conversion_error_with_pass(self):
        """The failing pass is named in the message."""
        error = ConversionError("bad input", "headings")

        assert str(error) == "Conversion failed in pass 'headings': bad input"
        assert error.pass_name == "headings"
        assert error.original_message == "bad input"

    def test_conversion_error_without_pass(self):
        """Without a pass the message is generic."""
        error = ConversionError("bad input")

        assert str(error) == "Conversion failed: bad input"
        assert error.pass_name is None

    def test_placeholder_error(self):
        """PlaceholderError carries the token and blames the restore step."""
        error = PlaceholderError("\ue000ph7\ue001")

        assert isinstance(error, ConversionError)
        assert error.token == "\ue000ph7\ue001"
        assert error.pass_name == "restore"
        assert "Unresolved placeholder token" in str(error)


class TestConfigErrors:
    """Test cases for configuration exceptions."""

    def test_config_error_with_field(self):
        """The offending field is named."""
        error = ConfigError("must be a boolean", "math")

        assert str(error) == "Configuration error in field 'math': must be a boolean"
        assert error.config_field == "math"

    def test_config_error_without_field(self):
        """Without a field the message is generic."""
        assert str(ConfigError("broken")) == "Configuration error: broken"

    def test_filesystem_error(self):
        """FilesystemError records the path, operation and reason."""
        error = FilesystemError("/tmp/x.yaml", "read", "Permission denied")

        assert str(error) == "Filesystem operation 'read' failed for /tmp/x.yaml: Permission denied"
        assert error.file_path == "/tmp/x.yaml"
        assert error.operation == "read"
        assert error.reason == "Permission denied"

    def test_filesystem_error_without_reason(self):
        """The reason is optional."""
        assert str(FilesystemError("a", "write")) == "Filesystem operation 'write' failed for a"


class TestCLIErrors:
    """Test cases for CLI exceptions."""

    def test_input_file_error(self):
        """InputFileError names the file and the reason."""
        error = InputFileError("page.wiki", "file not found")

        assert str(error) == "Cannot access page.wiki: file not found"
        assert error.file_path == "page.wiki"
        assert error.reason == "file not found"


class TestHierarchy:
    """Every application error is a RecordMarkError."""

    @pytest.mark.parametrize("error", [
        ConversionError("x"),
        PlaceholderError("t"),
        ConfigError("x"),
        FilesystemError("p", "read"),
        InputFileError("p", "r"),
    ])
    def test_base_class(self, error):
        """Each exception can be caught as RecordMarkError."""
        assert isinstance(error, RecordMarkError)

    def test_config_errors_share_base(self):
        """Config exceptions can be caught together."""
        assert issubclass(ConfigError, ConfigurationError)
        assert issubclass(FilesystemError, ConfigurationError)
        assert issubclass(InputFileError, CLIError)
