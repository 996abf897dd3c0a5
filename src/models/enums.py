"""Common enums used across the registry, store, and entrypoints."""

from enum import Enum


class RegistryStatus(str, Enum):
    NO_CONTROLLER = "no_controller"
    CONTROLLED = "controlled"
