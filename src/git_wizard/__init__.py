"""
Top-level package for git_wizard.

This package bundles three interactive git helpers, each exposed through
its own console script:

* ``gw-add``    -> :mod:`git_wizard.stager`
* ``gw-commit`` -> :mod:`git_wizard.composer`
* ``gw-push``   -> :mod:`git_wizard.pusher`

plus the ``gw-prepare-commit-msg`` hook (:mod:`git_wizard.hook`).
"""

__all__ = ["__version__"]

__version__ = "0.3.0"
