"""Core data models shared across porttrack components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ExtractionMatch:
    """One raw query match scoped to a single declaration site."""

    type_name: str
    method_name: str = ""
    supertype: Optional[str] = None
    interfaces: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Declaration:
    """A parsed type with its directly observed methods and ancestors."""

    name: str
    methods: Tuple[str, ...] = ()
    supertype: Optional[str] = None
    interfaces: Tuple[str, ...] = ()

    def absorb(self, match: ExtractionMatch) -> "Declaration":
        """Return a copy updated with the facts carried by ``match``."""
        methods = self.methods
        if match.method_name and match.method_name not in methods:
            methods = methods + (match.method_name,)
        return Declaration(
            name=self.name,
            methods=methods,
            supertype=match.supertype if match.supertype else self.supertype,
            interfaces=_union(self.interfaces, match.interfaces),
        )

    def merged(self, other: "Declaration") -> "Declaration":
        """Combine two partial views of the same type."""
        return Declaration(
            name=self.name,
            methods=_union(self.methods, other.methods),
            supertype=other.supertype if other.supertype else self.supertype,
            interfaces=_union(self.interfaces, other.interfaces),
        )

    def ancestors(self) -> Tuple[str, ...]:
        if self.supertype:
            return (self.supertype,) + self.interfaces
        return self.interfaces


def _union(left: Tuple[str, ...], right: Tuple[str, ...]) -> Tuple[str, ...]:
    if not right:
        return left
    extra = tuple(item for item in dict.fromkeys(right) if item not in left)
    return left + extra if extra else left


class TypeKind(str, Enum):
    """Structural classification of a declaration within its corpus."""

    CONCRETE = "concrete"
    ABSTRACT = "abstract"


@dataclass
class ClassMethods:
    """Raw per-grammar extraction record, tagged with a category by the caller."""

    class_name: str
    class_type: str
    methods: List[str]
    is_real_class: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class_name": self.class_name,
            "class_type": self.class_type,
            "methods": list(self.methods),
            "is_real_class": self.is_real_class,
        }


class IdNormalization(str, Enum):
    """How a registry family's logical ids are normalized before the join."""

    LOWER = "lower"
    UPPER = "upper"
    NONE = "none"

    def apply(self, logical_id: str) -> str:
        if self is IdNormalization.LOWER:
            return logical_id.lower()
        if self is IdNormalization.UPPER:
            return logical_id.upper()
        return logical_id


class ImplementationStatus(str, Enum):
    """Per-method implementation status in a coverage record."""

    IMPLEMENTED = "Implemented"
    NOT_IMPLEMENTED = "NotImplemented"


@dataclass
class MethodTracking:
    method_name: str
    status: ImplementationStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"method_name": self.method_name, "status": self.status.value}


@dataclass
class ClassTracking:
    """Coverage record for one reference type."""

    class_name: str
    class_type: str
    methods: List[MethodTracking] = field(default_factory=list)

    @property
    def implemented_count(self) -> int:
        return sum(1 for method in self.methods if method.status is ImplementationStatus.IMPLEMENTED)

    @property
    def tracked_count(self) -> int:
        return len(self.methods)

    @property
    def percentage_implemented(self) -> float:
        if not self.methods:
            return 0.0
        return self.implemented_count / self.tracked_count * 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class_name": self.class_name,
            "class_type": self.class_type,
            "methods": [method.to_dict() for method in self.methods],
            "percentage_implemented": self.percentage_implemented,
        }


@dataclass
class AnalysisResult:
    """Ordered list of coverage records, sorted by class name."""

    classes: List[ClassTracking] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"classes": [record.to_dict() for record in self.classes]}


@dataclass
class CategorySummary:
    """Aggregate coverage for every record sharing a category."""

    category: str
    classes: int
    implemented: int
    tracked: int

    @property
    def percentage(self) -> float:
        if not self.tracked:
            return 0.0
        return self.implemented / self.tracked * 100.0


__all__ = [
    "AnalysisResult",
    "CategorySummary",
    "ClassMethods",
    "ClassTracking",
    "Declaration",
    "ExtractionMatch",
    "IdNormalization",
    "ImplementationStatus",
    "MethodTracking",
    "TypeKind",
]
