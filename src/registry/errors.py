"""Rejections raised by registry operations.

Every error ends the current call with no state change.
"""

from __future__ import annotations


class RegistryError(Exception):
    default_message = "registry call rejected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidArgument(RegistryError, ValueError):
    default_message = "Invalid argument"


class AlreadyInitialized(RegistryError):
    default_message = "The registry has already been initialized"


class AlreadyRegistered(RegistryError):
    default_message = "curator already registered"


class InsufficientPayment(RegistryError):
    default_message = "Insufficient storage deposit"


class NotRegistered(RegistryError):
    default_message = "curator not registered"


class Unauthorized(RegistryError):
    default_message = "Unauthorized"


class InvalidWeightSum(RegistryError):
    default_message = "Final weights must sum to 100%"


class ConcurrentModification(RegistryError):
    default_message = "Registry state changed during the call"
