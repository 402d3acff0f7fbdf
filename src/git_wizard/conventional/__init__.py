"""
Conventional-commit support.

:mod:`.message` holds the commit draft model and its formatting rules;
:mod:`.lint` holds the declarative lint rule table and the checker that
applies it to a finished message.
"""
