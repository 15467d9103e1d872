"""Test helpers shared across natded test modules."""

from unittest import TestCase, main

from natded.logic.formula import Const
from natded.logic.knowledge_base import MemoryKnowledgeBase

__all__ = ["TestCase", "main", "atoms", "empty_kb"]


def atoms(*names):
    """Propositional atoms, modelled as constants."""
    return tuple(Const(name) for name in names)


def empty_kb():
    return MemoryKnowledgeBase()
