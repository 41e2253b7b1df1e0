"""Data models for the example tree and example results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Optional

from speccore.core.errors import FailureKind
from speccore.core.location import Location


class ExampleStatus(str, Enum):
    """Status of an example."""

    UNRUN = "unrun"
    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"
    PENDING = "pending"

    @property
    def failed(self) -> bool:
        return self in (ExampleStatus.FAIL, ExampleStatus.ERROR)


@dataclass(frozen=True)
class FailureDetail:
    """Why an example did not succeed."""

    message: str
    location: Location
    kind: FailureKind
    error_type: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "message": self.message,
            "location": self.location.to_dict(),
            "kind": self.kind.value,
            "error_type": self.error_type,
        }


@dataclass
class HookSet:
    """Before/after-each hooks declared directly in one group."""

    before_each: list[Callable[[], object]] = field(default_factory=list)
    after_each: list[Callable[[], object]] = field(default_factory=list)


@dataclass(eq=False)
class Example:
    """A leaf test case."""

    description: str
    location: Location
    body: Optional[Callable] = None
    pending: bool = False
    parent: Optional["Group"] = field(default=None, repr=False)
    status: ExampleStatus = ExampleStatus.UNRUN
    duration: Optional[float] = None
    failure: Optional[FailureDetail] = None

    @property
    def full_description(self) -> str:
        """Descriptions of all enclosing groups followed by this one."""
        parts = [self.description]
        group = self.parent
        while group is not None and not group.is_root:
            parts.append(group.description)
            group = group.parent
        return " ".join(reversed(parts))

    def ancestors(self) -> list["Group"]:
        """Enclosing groups, outermost first."""
        chain = []
        group = self.parent
        while group is not None:
            chain.append(group)
            group = group.parent
        chain.reverse()
        return chain


@dataclass(eq=False)
class Group:
    """A named, ordered collection of groups and examples."""

    description: str
    location: Optional[Location] = None
    parent: Optional["Group"] = field(default=None, repr=False)
    children: list["Group | Example"] = field(default_factory=list)
    hooks: HookSet = field(default_factory=HookSet)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def add(self, node: "Group | Example") -> None:
        """Append a child node in declaration order."""
        node.parent = self
        self.children.append(node)

    def examples(self) -> Iterator[Example]:
        """Yield every example below this group, depth-first."""
        for child in self.children:
            if isinstance(child, Group):
                yield from child.examples()
            else:
                yield child


@dataclass(frozen=True)
class ExampleResult:
    """Immutable outcome of one example, as handed to reporters."""

    description: str
    full_description: str
    location: Location
    status: ExampleStatus
    duration: Optional[float] = None
    failure: Optional[FailureDetail] = None

    @classmethod
    def from_example(cls, example: Example) -> "ExampleResult":
        """Snapshot a finished example."""
        return cls(
            description=example.description,
            full_description=example.full_description,
            location=example.location,
            status=example.status,
            duration=example.duration,
            failure=example.failure,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "description": self.description,
            "full_description": self.full_description,
            "location": self.location.to_dict(),
            "status": self.status.value,
            "duration_ms": int(self.duration * 1000) if self.duration is not None else None,
            "failure": self.failure.to_dict() if self.failure else None,
        }


@dataclass
class RunSummary:
    """Aggregate outcome of one run."""

    results: list[ExampleResult] = field(default_factory=list)
    aborted: bool = False
    duration: float = 0.0

    def count(self, status: ExampleStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return self.count(ExampleStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return self.count(ExampleStatus.FAIL)

    @property
    def errored(self) -> int:
        return self.count(ExampleStatus.ERROR)

    @property
    def pending(self) -> int:
        return self.count(ExampleStatus.PENDING)

    @property
    def success(self) -> bool:
        """True when no example failed or errored."""
        return not any(r.status.failed for r in self.results)

    @property
    def failures(self) -> list[ExampleResult]:
        return [r for r in self.results if r.status.failed]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "success": self.succeeded,
            "fail": self.failed,
            "error": self.errored,
            "pending": self.pending,
            "aborted": self.aborted,
            "duration_ms": int(self.duration * 1000),
            "results": [r.to_dict() for r in self.results],
        }
