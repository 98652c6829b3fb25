"""Shared constants for code-critic.

For environment-based configuration (log commands, timeouts), use the env module:
    from common.env import env
    timeout = env.command_timeout()
"""

import os

# Source classification
JAVA_SUFFIX = ".java"

# Paths containing one of these are test sources, skipped unless includeTests
TEST_SOURCE_MARKERS: tuple[str, ...] = tuple(dict.fromkeys(["src/test", f"src{os.sep}test"]))

# Metadata directories probed to detect the VCS
GIT_DIR = ".git"
HG_DIR = ".hg"

# Link path segments appended to the repository url
GIT_LINK_SEGMENT = "commit/"
HG_LINK_SEGMENT = "rev/"

HG_DEFAULT_BRANCH = "default"

# Diff rendering
NO_CHANGES_HTML = '<span style="color: gray;">no changes detected</span>'
RED_BACKGROUND = "#ffcccc"
GREEN_BACKGROUND = "#c6ebd9"

NO_FILES_MESSAGE = "There are no files to analyze."
