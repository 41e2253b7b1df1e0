"""
speccore - execution core of a behavior-style test framework.

This package provides:
- A registration DSL (describe/context/it/pending) that builds a tree of examples
- Selection of examples by description pattern or by any line of their body
- A runner driving each example through before hooks, body and after hooks
- A narrow reporter interface for observing results
"""

__version__ = "0.1.0"

from speccore.dsl import (
    after_each,
    before_each,
    context,
    describe,
    fail,
    it,
    pending,
)

__all__ = [
    "after_each",
    "before_each",
    "context",
    "describe",
    "fail",
    "it",
    "pending",
]
