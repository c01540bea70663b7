"""Base classes for declaration extractor plugins."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Tuple

from ..models import ExtractionMatch


class DeclarationExtractor(ABC):
    """Contract for extractors that turn one source file into raw declaration matches."""

    #: Registry key used in configuration (``grammar: java``).
    grammar: str = ""
    #: File suffixes this extractor reads, including the leading dot.
    extensions: Tuple[str, ...] = ()
    #: False for grammars without an inheritance concept; every type is then concrete.
    tracks_inheritance: bool = True

    def supports(self, path: Path) -> bool:
        """Return True when ``path`` should be handed to :meth:`extract`."""
        return path.suffix.lower() in self.extensions

    @abstractmethod
    def extract(self, source: bytes) -> Iterable[ExtractionMatch]:
        """Produce one match per declaration site found in ``source``."""
