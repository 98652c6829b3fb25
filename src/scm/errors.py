"""Exceptions raised while resolving repositories and parsing VCS logs."""


class CodeCriticError(Exception):
    """Base exception for code-critic errors."""

    pass


class NotAVcsProject(CodeCriticError):
    """No recognizable VCS metadata directory in the working directory."""

    pass


class ConfigReadFailure(CodeCriticError):
    """A VCS metadata or configuration file could not be read or understood."""

    pass


class InteractiveInputFailure(CodeCriticError):
    """Operator input could not be read during a selection prompt."""

    pass


class ParseInvariantViolation(CodeCriticError):
    """The log parser reached a state it cannot interpret."""

    pass


class InvalidLogCommand(CodeCriticError):
    """An operator supplied log command cannot produce parseable output."""

    pass


class CommandFailure(CodeCriticError):
    """An external command could not be run or exited with a non-zero status."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class CommandTimeout(CommandFailure):
    """An external command did not terminate within the configured timeout."""

    pass
