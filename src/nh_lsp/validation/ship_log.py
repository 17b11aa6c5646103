"""Cross-reference validation for ship log documents.

A context is rebuilt from scratch for every run: star system configs
contribute entry positions and declared curiosities, planet configs map
star systems to their ship log documents, and each ship log document
contributes astro-object, entry and fact ids plus the references between
them. The rule checks then run over those registries.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from itertools import groupby

from nh_lsp import baseline
from nh_lsp.logging import JsonlEventLogger
from nh_lsp.project import FileCategory, FileVersion, Project, load_json_object
from nh_lsp.security import normalize_relative_path
from nh_lsp.text import Range, XmlDocument, XmlElement, XmlParseError, parse_xml
from nh_lsp.validation.base import (
    SHIPLOG_DUPLICATE_ID,
    SHIPLOG_MISSING_CURIOSITY,
    SHIPLOG_MISSING_SOURCE_ID,
    SHIPLOG_RESERVED_ID,
    FileDiagnostic,
    error,
)

DEFAULT_ENTRY_NAME = "Unnamed Entry"
DEFAULT_STAR_SYSTEM = "SolarSystem"
FACT_ELEMENTS = ("RumorFact", "ExploreFact")


@dataclass(slots=True, frozen=True)
class IdRecord:
    """One occurrence of an id inside a ship log document."""

    value: str
    file: FileVersion
    range: Range


@dataclass(slots=True, frozen=True)
class Entry:
    """Derived, de-duplicated ship log entry."""

    id: str
    astro_object: str
    name: str
    position: tuple[float, float] | None = None
    parent: str | None = None
    is_curiosity: bool = False
    curiosity: str | None = None
    sources: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "astroObject": self.astro_object,
            "position": list(self.position) if self.position is not None else None,
            "name": self.name,
            "parent": self.parent,
            "isCuriosity": self.is_curiosity,
            "sources": list(self.sources),
            "curiosity": self.curiosity,
        }


@dataclass(slots=True)
class ShipLogContext:
    """Identifier registries and derived entry index for one validation run."""

    extra_curiosities: tuple[str, ...] = ()
    astro_object_ids: list[IdRecord] = field(default_factory=list)
    entry_ids: list[IdRecord] = field(default_factory=list)
    fact_ids: list[IdRecord] = field(default_factory=list)
    curiosity_references: list[IdRecord] = field(default_factory=list)
    source_id_references: list[IdRecord] = field(default_factory=list)
    entries: dict[str, Entry] = field(default_factory=dict)
    entry_positions: dict[str, tuple[float, float]] = field(default_factory=dict)
    declared_curiosities: list[str] = field(default_factory=list)
    system_ship_logs: dict[str, list[str]] = field(default_factory=dict)
    astro_objects_by_path: dict[str, str] = field(default_factory=dict)
    parse_failures: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_project(
        cls, project: Project, extra_curiosities: tuple[str, ...] = ()
    ) -> ShipLogContext:
        """Build registries and the entry index from the current project state."""
        context = cls(extra_curiosities=extra_curiosities)
        for system in project.files(FileCategory.SYSTEM):
            try:
                context.add_system_config(system.contents)
            except json.JSONDecodeError as error_:
                context.parse_failures.append((system.uri, str(error_)))
        for planet in project.files(FileCategory.PLANET):
            try:
                context.add_planet_config(planet.contents)
            except json.JSONDecodeError as error_:
                context.parse_failures.append((planet.uri, str(error_)))
        for ship_log in project.files(FileCategory.SHIP_LOG):
            try:
                context.parse(
                    FileVersion.of(ship_log),
                    project.relative_path(ship_log),
                    ship_log.contents,
                )
            except XmlParseError as error_:
                context.parse_failures.append((ship_log.uri, str(error_)))
        context.merge_baseline()
        return context

    def add_system_config(self, text: str) -> None:
        """Collect entry positions and declared curiosities from a star system config."""
        payload = load_json_object(text)
        if payload is None:
            return
        for item in _objects(payload.get("entryPositions")):
            entry_id = item.get("id")
            position = item.get("position")
            if not isinstance(entry_id, str) or not isinstance(position, dict):
                continue
            x, y = position.get("x"), position.get("y")
            if _is_number(x) and _is_number(y):
                self.entry_positions[entry_id] = (float(x), float(y))
        for item in _objects(payload.get("curiosities")):
            curiosity_id = item.get("id")
            if isinstance(curiosity_id, str) and curiosity_id.strip():
                self.declared_curiosities.append(curiosity_id.strip())

    def add_planet_config(self, text: str) -> None:
        """Map the planet's star system to the ship log document it declares."""
        payload = load_json_object(text)
        if payload is None:
            return
        ship_log = payload.get("ShipLog")
        if not isinstance(ship_log, dict):
            return
        xml_file = ship_log.get("xmlFile")
        if not isinstance(xml_file, str) or not xml_file.strip():
            return
        star_system = payload.get("starSystem")
        if not isinstance(star_system, str) or not star_system:
            star_system = DEFAULT_STAR_SYSTEM
        self.system_ship_logs.setdefault(star_system, []).append(
            normalize_relative_path(xml_file)
        )

    def parse(self, file: FileVersion, relative_path: str, text: str) -> None:
        """Walk one ship log document into the registries and entry index."""
        document = parse_xml(text)
        root = document.find_first("AstroObjectEntry")
        if root is None:
            return
        id_element = root.find("ID")
        astro_object = id_element.text.strip() if id_element is not None else ""
        if astro_object:
            self.astro_objects_by_path[normalize_relative_path(relative_path)] = astro_object
        for child in root.children:
            if child.name == "ID":
                self._record(self.astro_object_ids, document, child, file)
            elif child.name == "Entry":
                self._parse_entry(document, child, file, astro_object, parent=None)

    def _parse_entry(
        self,
        document: XmlDocument,
        element: XmlElement,
        file: FileVersion,
        astro_object: str,
        parent: str | None,
    ) -> None:
        id_element = element.find("ID")
        entry_id = id_element.text.strip() if id_element is not None else ""
        name: str | None = None
        is_curiosity = False
        curiosity: str | None = None
        sources: list[str] = []
        for child in element.children:
            if child.name == "ID":
                self._record(self.entry_ids, document, child, file)
            elif child.name == "Name":
                name = child.text.strip() or None
            elif child.name == "IsCuriosity":
                is_curiosity = True
            elif child.name == "Curiosity":
                record = self._record(self.curiosity_references, document, child, file)
                curiosity = record.value or None
            elif child.name in FACT_ELEMENTS:
                fact_id = child.find("ID")
                if fact_id is not None:
                    self._record(self.fact_ids, document, fact_id, file)
                source_id = child.find("SourceID")
                if source_id is not None:
                    record = self._record(self.source_id_references, document, source_id, file)
                    if record.value:
                        sources.append(record.value)
            elif child.name == "Entry":
                self._parse_entry(document, child, file, astro_object, parent=entry_id or None)
        if not entry_id:
            return
        self.entries[entry_id] = Entry(
            id=entry_id,
            astro_object=astro_object,
            name=name or DEFAULT_ENTRY_NAME,
            position=self.entry_positions.get(entry_id),
            parent=parent,
            is_curiosity=is_curiosity,
            curiosity=curiosity,
            sources=tuple(sources),
        )

    @staticmethod
    def _record(
        registry: list[IdRecord],
        document: XmlDocument,
        element: XmlElement,
        file: FileVersion,
    ) -> IdRecord:
        # Blank ids are kept so the rules report them.
        value = element.text.strip()
        record = IdRecord(value=value, file=file, range=document.range_of(element))
        registry.append(record)
        return record

    def merge_baseline(self) -> None:
        """Add base-game entries without replacing project entries of the same id."""
        for item in baseline.ENTRIES:
            if item.id in self.entries:
                continue
            self.entries[item.id] = Entry(
                id=item.id,
                astro_object=item.astro_object,
                name=item.name,
                position=self.entry_positions.get(item.id),
                parent=item.parent,
                is_curiosity=item.is_curiosity,
                curiosity=item.curiosity,
            )
        self._break_parent_cycles()

    def _break_parent_cycles(self) -> None:
        for entry_id in list(self.entries):
            seen = {entry_id}
            child = entry_id
            current = self.entries[entry_id].parent
            while current is not None and current in self.entries:
                if current in seen:
                    # child -> current closes the loop; cut that link.
                    self.entries[child] = replace(self.entries[child], parent=None)
                    break
                seen.add(current)
                child = current
                current = self.entries[current].parent

    def validate(self) -> list[FileDiagnostic]:
        """Run every rule over the registries."""
        errors: list[FileDiagnostic] = []
        self._validate_duplicates(errors, self.astro_object_ids, "Astro Object")
        self._validate_duplicates(errors, self.entry_ids, "Entry")
        self._validate_duplicates(errors, self.fact_ids, "Fact")
        self._validate_reserved(errors, self.entry_ids, baseline.RESERVED_ENTRY_IDS)
        self._validate_reserved(errors, self.fact_ids, baseline.RESERVED_FACT_IDS)
        self._validate_curiosity_references(errors)
        self._validate_source_ids(errors)
        return errors

    @staticmethod
    def _validate_duplicates(
        errors: list[FileDiagnostic], records: list[IdRecord], namespace: str
    ) -> None:
        ordered = sorted(records, key=lambda record: record.value)
        for value, group in groupby(ordered, key=lambda record: record.value):
            duplicates = list(group)
            if len(duplicates) < 2:
                continue
            for record in duplicates:
                errors.append(
                    error(
                        record.file,
                        record.range,
                        SHIPLOG_DUPLICATE_ID,
                        f"Duplicate {namespace} ID: `{value}`",
                    )
                )

    @staticmethod
    def _validate_reserved(
        errors: list[FileDiagnostic], records: list[IdRecord], reserved: frozenset[str]
    ) -> None:
        for record in records:
            if record.value in reserved:
                errors.append(
                    error(
                        record.file,
                        record.range,
                        SHIPLOG_RESERVED_ID,
                        f"ID `{record.value}` is taken by the base game",
                    )
                )

    def permitted_curiosities(self) -> set[str]:
        known = (
            *baseline.BUILTIN_CURIOSITIES,
            *self.extra_curiosities,
            *self.declared_curiosities,
        )
        return {value.casefold() for value in known}

    def _validate_curiosity_references(self, errors: list[FileDiagnostic]) -> None:
        permitted = self.permitted_curiosities()
        for reference in self.curiosity_references:
            if reference.value.casefold() in permitted:
                continue
            errors.append(
                error(
                    reference.file,
                    reference.range,
                    SHIPLOG_MISSING_CURIOSITY,
                    f"Unknown Curiosity: `{reference.value}`, "
                    "declare it in a star system config's curiosities",
                )
            )

    def _validate_source_ids(self, errors: list[FileDiagnostic]) -> None:
        known = {record.value for record in self.entry_ids if record.value}
        known |= baseline.RESERVED_ENTRY_IDS
        for reference in self.source_id_references:
            if reference.value in known:
                continue
            errors.append(
                error(
                    reference.file,
                    reference.range,
                    SHIPLOG_MISSING_SOURCE_ID,
                    f"Unknown Entry: `{reference.value}`",
                )
            )

    def entries_for_system(self, system: str) -> list[Entry] | None:
        """Return entries shown in a star system's ship log, or None for unknown systems."""
        paths = self.system_ship_logs.get(system)
        if paths is None:
            return None
        astro_objects = {
            self.astro_objects_by_path[path]
            for path in paths
            if path in self.astro_objects_by_path
        }
        astro_objects.update(baseline.ASTRO_OBJECT_IDS)
        return sorted(
            (entry for entry in self.entries.values() if entry.astro_object in astro_objects),
            key=lambda entry: entry.id,
        )


class ShipLogValidator:
    """Validator running the cross-reference rules over every ship log."""

    name = "ship_log"

    def __init__(
        self,
        extra_curiosities: tuple[str, ...] = (),
        logger: JsonlEventLogger | None = None,
    ) -> None:
        self._extra_curiosities = extra_curiosities
        self._logger = logger

    def prepare(self) -> None:
        """Baseline data is static; nothing to load."""

    def should_invalidate(self, changed_uris: list[str], project: Project) -> bool:
        return project.contains_any(changed_uris, (FileCategory.SHIP_LOG, FileCategory.SYSTEM))

    def validate(self, project: Project) -> list[FileDiagnostic]:
        context = self.build_context(project)
        return context.validate()

    def build_context(self, project: Project) -> ShipLogContext:
        context = ShipLogContext.from_project(project, self._extra_curiosities)
        if self._logger is not None:
            for uri, reason in context.parse_failures:
                self._logger.log(
                    "shiplog.parse_failed",
                    f"Error parsing {uri}: {reason}",
                    level="warning",
                    uri=uri,
                )
        return context


def _objects(value: object) -> list[dict[str, object]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
