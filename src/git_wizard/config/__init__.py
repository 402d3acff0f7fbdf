"""
Configuration loading for git_wizard.

Provides the loader for the optional user and repository configuration
files. See :mod:`git_wizard.config.loader` for implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
