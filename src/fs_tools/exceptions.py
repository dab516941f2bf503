class FsToolsError(Exception):
    """Base class for errors raised by fs_tools."""

    pass


class ConfigError(FsToolsError):
    """
    Exception raised when a configuration is rejected before any filesystem work begins.

    Configuration errors abort the whole invocation. They cover invalid option
    combinations, unparsable size limits, missing ignore files, and the more
    specific pattern and config-file errors below.

    Example:
        >>> error = ConfigError("Cannot combine --ext and --exclude-ext")
        >>> str(error)
        'Cannot combine --ext and --exclude-ext'
    """

    pass


class InvalidPatternError(ConfigError):
    """
    Exception raised when a user-supplied regular expression fails to compile.

    Patterns are compiled when the filter rule is built, so a bad pattern is
    reported before traversal starts rather than in the middle of a walk.

    Attributes:
        pattern (str): The pattern text that failed to compile.
        reason (str): The message reported by the regular expression engine.

    Example:
        >>> error = InvalidPatternError("(unclosed", "missing ), unterminated subpattern at position 0")
        >>> str(error)
        "Invalid regex pattern '(unclosed': missing ), unterminated subpattern at position 0"
    """

    def __init__(self, pattern: str, reason: str) -> None:
        """
        Initialize the exception with the offending pattern.

        Args:
            pattern (str): The pattern that failed to compile.
            reason (str): Why compilation failed.
        """
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regex pattern '{pattern}': {reason}")


class ConfigParseError(ConfigError):
    """
    Exception raised when a configuration file cannot be read or holds invalid values.

    Attributes:
        file_path (str): Path to the configuration file.
        detail (str): Description of the problem (syntax error, wrong type, ...).

    Example:
        >>> error = ConfigParseError("fs-tools.toml", "display.max_depth must be a non-negative integer")
        >>> str(error)
        'Invalid configuration file fs-tools.toml: display.max_depth must be a non-negative integer'
    """

    def __init__(self, file_path: str, detail: str) -> None:
        """
        Initialize the exception with the file and the problem found in it.

        Args:
            file_path (str): Path to the configuration file.
            detail (str): Description of the problem.
        """
        self.file_path = file_path
        self.detail = detail
        super().__init__(f"Invalid configuration file {file_path}: {detail}")
