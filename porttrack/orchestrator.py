"""Pipeline orchestration: extract, resolve, score, write."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .categories import resolve_category
from .config import PortTrackConfig, SideConfig, load_config
from .coverage import CoverageAnalyzer, summarize
from .equivalence import MethodTableSet, load_tables
from .extractors import DeclarationExtractor, get_extractor
from .graph import TargetIndex, extract_graph, to_records
from .logging import get_logger
from .models import AnalysisResult, CategorySummary, ClassMethods
from .registry import ClassMapping, RegistryResolver, load_registry_table
from .report import (
    ANALYSIS_FILENAME,
    REFERENCE_FILENAME,
    TARGET_FILENAME,
    write_analysis,
    write_records,
)
from .source_scanner import SourceScanner


@dataclass
class RunOutcome:
    """Everything a single analysis run produced."""

    reference: List[ClassMethods]
    target: List[ClassMethods]
    result: AnalysisResult
    summaries: List[CategorySummary]
    written: List[Path] = field(default_factory=list)


class Orchestrator:
    """Coordinates extraction, registry resolution and coverage scoring."""

    def __init__(
        self,
        scanner: SourceScanner | None = None,
        extractors: Optional[Dict[str, DeclarationExtractor]] = None,
    ) -> None:
        self.scanner = scanner or SourceScanner()
        self._extractors: Dict[str, DeclarationExtractor] = dict(extractors or {})
        self.logger = get_logger("orchestrator")

    def load_config(self, path: str | Path, config_file: str | Path | None = None) -> PortTrackConfig:
        """Load the config for project ``path``; an explicit ``config_file`` keeps ``path`` as the root."""
        if config_file is None:
            return load_config(Path(path))
        return load_config(Path(config_file), root=Path(path))

    def load_tables(self, config: PortTrackConfig) -> MethodTableSet:
        tables = load_tables(config.methods.tables)
        return MethodTableSet(
            tables=tables,
            categories=dict(config.methods.categories),
            default_table=config.methods.default_table,
        )

    def resolve_mappings(self, config: PortTrackConfig) -> Dict[str, ClassMapping]:
        """Join registry and generated registrations; a bad registry table is fatal."""
        families = config.registry.families
        if not families or config.registry.classes is None:
            return {}
        table = load_registry_table(config.registry.classes)
        mappings = RegistryResolver(families).resolve(table)
        for category, mapping in mappings.items():
            self.logger.info("Registry family %s: %d class mappings", category, len(mapping))
        return mappings

    def extract_side(self, side: SideConfig) -> List[ClassMethods]:
        """Extract every source root of one side into category-tagged records."""
        extractor = self._extractor_for(side.grammar)
        records: List[ClassMethods] = []
        for spec in side.sources:
            if not spec.path.is_dir():
                self.logger.warning("Source root not found: %s", spec.path)
                continue
            files = self.scanner.iter_sources(spec.path, extractor.extensions)
            graph = extract_graph(extractor, files)
            for record in to_records(graph, tracks_inheritance=extractor.tracks_inheritance):
                record.class_type = resolve_category(spec.category, record.class_name)
                records.append(record)
            self.logger.info(
                "Extracted %d %s types from %s", len(graph), side.grammar, spec.path
            )
        return records

    def run(
        self,
        path: str | Path = ".",
        *,
        config_file: str | Path | None = None,
        output_dir: str | Path | None = None,
        write: bool = True,
    ) -> RunOutcome:
        """Run the full pipeline; outputs are written only after every phase succeeds."""
        config = self.load_config(path, config_file)
        self.logger.info("Starting analysis for %s", config.root)

        tables = self.load_tables(config)
        mappings = self.resolve_mappings(config)

        reference = self.extract_side(config.reference)
        target = self.extract_side(config.target)
        self.logger.debug(
            "Collected %d reference and %d target records", len(reference), len(target)
        )

        analyzer = CoverageAnalyzer(tables, mappings)
        result = analyzer.analyze(reference, TargetIndex(target))
        self.logger.info("Scored %d reference classes", len(result.classes))

        outcome = RunOutcome(
            reference=reference,
            target=target,
            result=result,
            summaries=summarize(result),
        )
        if write:
            directory = Path(output_dir) if output_dir is not None else config.output.directory
            outcome.written = [
                write_records(directory / REFERENCE_FILENAME, reference),
                write_records(directory / TARGET_FILENAME, target),
                write_analysis(directory / ANALYSIS_FILENAME, result),
            ]
            for written in outcome.written:
                self.logger.info("Wrote %s", written)
        return outcome

    def _extractor_for(self, grammar: str) -> DeclarationExtractor:
        key = grammar.lower()
        extractor = self._extractors.get(key)
        if extractor is None:
            extractor = get_extractor(key)
            self._extractors[key] = extractor
        return extractor


__all__ = ["Orchestrator", "RunOutcome"]
