"""
Version control integration.

The only backend is Git. :class:`GitClient` reaches git exclusively
through the injectable :func:`run_git` capability.
"""

from .git_client import GitClient, GitError, run_git  # noqa: F401
