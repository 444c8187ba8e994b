"""Release store: model, store reads and the lifecycle orchestrators."""

from .activation import ActivationStrategy, AtomicRename, RemoveThenLink
from .model import DependencyIdentity, Descriptor, Release
from .service import Shelf
from .store import Store

__all__ = [
    "ActivationStrategy",
    "AtomicRename",
    "DependencyIdentity",
    "Descriptor",
    "Release",
    "RemoveThenLink",
    "Shelf",
    "Store",
]
