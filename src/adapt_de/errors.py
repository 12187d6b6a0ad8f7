"""
Exception Taxonomy
==================

Construction-time errors (``ConfigurationError`` and its subclasses) abort
object construction and propagate to the top-level loader. Runtime errors
raised from ``select``/``update`` abort the run: the already-generated flags
and the partially recorded feedback would be inconsistent afterwards.

The only non-exception failure signal in the package is the boolean
returned by ``Function.record``; callers check it and raise
:class:`FeedbackRejectedError` themselves.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A configuration document holds an invalid value or is unreadable."""


class TypeMismatchError(ConfigurationError):
    """
    A configuration value was read as the wrong kind.

    Also raised when the factory builds an object that is not of the
    expected family (e.g. a ControlRange where a Function is required).

    Example
    -------
    >>> node = from_data({"size": "ten"})
    >>> node["size"].get_int()
    Traceback (most recent call last):
    ...
    TypeMismatchError: expected int at 'size', found string
    """


class UnknownTypeError(ConfigurationError):
    """A ``classname`` is not present in the prototype registry."""


class FeedbackRejectedError(RuntimeError):
    """
    No node of a Function tree accepted recorded feedback.

    This is the schema check between a ControlUpdate / ControlSelection
    strategy and the shape of the configured Function tree. It is only
    discovered at first use, not when the mechanism is built.
    """


class ParameterIndexError(IndexError):
    """A ControlParameter or ControlFunction slot was accessed out of range."""


class RangeExhaustedError(RuntimeError):
    """
    The rejection loop of a ControlMechanism hit its ``max_attempts`` cap.

    Only raised when ``max_attempts`` is configured; without it the loop is
    unbounded and a ControlRange that can never be satisfied is the caller's
    responsibility.
    """
