"""Build-time event handling: registration, resolution and document writing."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set

from .config import ConfDocConfig
from .errors import CyclicDependencyError
from .extract import build_definition
from .frontend.discovery import iter_source_files
from .frontend.scanner import SourceScanner
from .logging import at, get_logger
from .models import DefinitionDoc, RawDefinition, ResolvedOutput
from .postproc.markers import MarkerPatcher, PatchOutcome
from .registry import Registry, get_registry
from .render import TableRenderer
from .resolver import missing_dependencies, resolve


@dataclass
class BuildReport:
    """Summary of a build over a set of raw definitions."""

    outcomes: List[PatchOutcome] = field(default_factory=list)
    unresolved: Dict[str, List[str]] = field(default_factory=dict)
    definitions: int = 0

    @property
    def changed(self) -> List[PatchOutcome]:
        return [outcome for outcome in self.outcomes if outcome.changed]


class BuildEngine:
    """Feeds definitions into the registry and writes roots once they resolve.

    Every event re-attempts resolution for each root that has not been
    written yet, so a root whose dependencies arrive later is completed by
    whichever event registers the last of them.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        *,
        root: Path | None = None,
        renderer: TableRenderer | None = None,
        patcher: MarkerPatcher | None = None,
        dry_run: bool = False,
    ) -> None:
        self.registry = registry if registry is not None else get_registry()
        self.root = (root or Path.cwd()).expanduser().resolve()
        self.renderer = renderer or TableRenderer()
        self.patcher = patcher or MarkerPatcher()
        self.dry_run = dry_run
        self.logger = get_logger("engine")
        self._lock = threading.Lock()
        self._claimed: Set[str] = set()

    def register(self, definition: DefinitionDoc) -> List[PatchOutcome]:
        """Registration event: store the definition, then retry waiting roots."""
        self.registry.insert(definition)
        return self._attempt_roots()

    def request_generation(self, definition: DefinitionDoc) -> List[PatchOutcome]:
        """Generation-request event: store the root and try to resolve it."""
        if definition.request is None:
            raise ValueError(f"{definition.identifier} carries no generation request")
        self.registry.insert(definition)
        return self._attempt_roots()

    def process(self, raw: RawDefinition) -> List[PatchOutcome]:
        definition = build_definition(raw)
        if definition.is_root:
            return self.request_generation(definition)
        return self.register(definition)

    def build(self, definitions: Iterable[RawDefinition]) -> BuildReport:
        report = BuildReport()
        for raw in definitions:
            report.outcomes.extend(self.process(raw))
            report.definitions += 1
        report.unresolved = self.unresolved()
        for identifier, missing in report.unresolved.items():
            self.logger.warning(
                "No documentation written for %s: unregistered dependencies %s",
                identifier,
                ", ".join(missing),
                extra=at(self._location_of(identifier)),
            )
        return report

    def unresolved(self) -> Dict[str, List[str]]:
        """Roots still waiting, mapped to the identifiers they are missing."""
        snapshot = self.registry.snapshot()
        with self._lock:
            claimed = set(self._claimed)
        return {
            root.identifier: missing_dependencies(root, snapshot)
            for root in self.registry.roots()
            if root.identifier not in claimed
        }

    def _location_of(self, identifier: str) -> Optional[str]:
        definition = self.registry.get(identifier)
        return definition.location if definition is not None else None

    @contextmanager
    def session(self) -> Iterator["BuildEngine"]:
        """Scope the registry to one build; it is cleared on exit."""
        try:
            yield self
        finally:
            self.registry.clear()
            with self._lock:
                self._claimed.clear()

    def _attempt_roots(self) -> List[PatchOutcome]:
        outcomes: List[PatchOutcome] = []
        for root in self.registry.roots():
            output = self._claim(root)
            if output is not None:
                outcomes.append(self._write(root, output))
        return outcomes

    def _claim(self, root: DefinitionDoc) -> Optional[ResolvedOutput]:
        with self._lock:
            if root.identifier in self._claimed:
                return None
            snapshot = self.registry.snapshot()
            try:
                output = resolve(root, snapshot)
            except CyclicDependencyError:
                self._claimed.add(root.identifier)
                raise
            if output is None:
                self.logger.debug(
                    "Deferring %s until %s is registered",
                    root.identifier,
                    ", ".join(missing_dependencies(root, snapshot)),
                    extra=at(root.location),
                )
                return None
            self._claimed.add(root.identifier)
            return output

    def _write(self, root: DefinitionDoc, output: ResolvedOutput) -> PatchOutcome:
        assert root.request is not None
        markdown = self.renderer.render(output)
        target = Path(root.request.target)
        if not target.is_absolute():
            target = self.root / target
        self.logger.debug(
            "Writing %s documentation to %s", root.identifier, target, extra=at(root.location)
        )
        return self.patcher.patch_file(
            target,
            f"\n{markdown}\n\n",
            slot=root.request.slot,
            dry_run=self.dry_run,
        )


def scan_project(config: ConfDocConfig, scanner: SourceScanner | None = None) -> Iterator[RawDefinition]:
    """Yield raw definitions from every source file the configuration selects."""
    scanner = scanner or SourceScanner()
    for path in iter_source_files(config.root, config.include, config.exclude_paths):
        display_name = path.relative_to(config.root).as_posix()
        yield from scanner.scan_file(path, display_name=display_name)


__all__ = ["BuildEngine", "BuildReport", "scan_project"]
