"""Environment configuration interface for code-critic.

This module provides a clean interface for accessing environment variables,
centralizing all environment variable access in one place.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def log_level() -> str:
        """Get the default log level.

        Returns:
            Log level name, defaults to 'INFO'
        """
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @staticmethod
    def git_log_command() -> str | None:
        """Get the operator supplied git log command prefix.

        The branch and ``--name-only`` are appended to it, so a value like
        ``git log origin/master..`` replaces the detected reference branch.

        Returns:
            Command prefix, or None when not set
        """
        return os.getenv("CODE_CRITIC_GIT_LOG") or None

    @staticmethod
    def hg_log_command() -> str | None:
        """Get the operator supplied hg log command.

        Returns:
            Full command, or None when not set
        """
        return os.getenv("CODE_CRITIC_HG_LOG") or None

    @staticmethod
    def command_timeout() -> float:
        """Get the timeout applied to every VCS subprocess.

        Returns:
            Timeout in seconds, defaults to 300
        """
        return float(os.getenv("CODE_CRITIC_COMMAND_TIMEOUT", "300"))

    @staticmethod
    def generate_diffs() -> bool:
        """Whether colored diffs are generated for non-http repositories.

        Returns:
            True unless CODE_CRITIC_DIFFS is set to a false value
        """
        return os.getenv("CODE_CRITIC_DIFFS", "true").strip().lower() in _TRUE_VALUES


# Singleton instance for convenient access
env = Environment()
