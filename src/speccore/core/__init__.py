"""Example tree, selection and execution."""

from speccore.core.errors import AssertionFailure, ConfigurationError, FailureKind
from speccore.core.location import Location
from speccore.core.matcher import DescriptionFilter, LocationFilter, matches
from speccore.core.models import Example, ExampleResult, ExampleStatus, Group, RunSummary
from speccore.core.registry import Suite
from speccore.core.runner import Runner

__all__ = [
    "AssertionFailure",
    "ConfigurationError",
    "DescriptionFilter",
    "Example",
    "ExampleResult",
    "ExampleStatus",
    "FailureKind",
    "Group",
    "Location",
    "LocationFilter",
    "Runner",
    "RunSummary",
    "Suite",
    "matches",
]
