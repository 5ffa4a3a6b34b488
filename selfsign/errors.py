#! /usr/bin/env python
# vim: expandtab shiftwidth=4 softtabstop=4 tabstop=17 filetype=python :
"""Exceptions raised while generating and handling self-signed material.

File-system failures are not wrapped, they surface as the builtin OSError.
"""


class SelfSignError(Exception):
    pass


class GenerationError(SelfSignError):
    """Key algorithm, store format or secure random source unavailable"""


class NameFormatError(SelfSignError, ValueError):
    """Distinguished name could not be parsed"""


class SigningError(SelfSignError):
    """Certificate signature could not be computed"""


class AuthenticationError(SelfSignError):
    """Wrong password for a key store entry"""


class ConfigurationError(SelfSignError):
    """A key store needed for SSL could not be created"""
