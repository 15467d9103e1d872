# coding: utf-8
"""
Public subclasses of different Exceptions

Rule failures inside the kernel are never raised: they are returned as
``Err`` contexts. These exceptions cover everything around the kernel.
"""


class NatDedException(Exception):
    """Base class for natded exceptions"""

    pass


class EncodingError(NatDedException):
    """Raised when encoded formula or deduction data is malformed."""

    pass


class IllFormedFormulaError(NatDedException):
    """Raised when a knowledge base is asked to store an ill-formed theorem."""

    pass


class KernelConfigError(NatDedException):
    """Raised for invalid kernel configuration values."""

    pass
