"""Result reporting."""

from speccore.report.base import MemoryReporter, Reporter

__all__ = ["MemoryReporter", "Reporter"]
