from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from nh_lsp.baseline import ENTRIES
from nh_lsp.config import load_effective_config
from nh_lsp.project import Project
from nh_lsp.validation import Entry, ShipLogContext


def _context(root: Path) -> ShipLogContext:
    project = Project(root=root, discovery=load_effective_config(root).discovery)
    project.discover()
    return ShipLogContext.from_project(project)


def test_unknown_system_returns_none(example_mod: Path) -> None:
    assert _context(example_mod).entries_for_system("UnknownSystem") is None


def test_system_entries_include_project_and_baseline_entries(example_mod: Path) -> None:
    entries = _context(example_mod).entries_for_system("ExampleSystem")

    assert entries is not None
    ids = [entry.id for entry in entries]
    assert ids == sorted(ids)
    assert {"EXAMPLE_ENTRY", "EXAMPLE_CHILD_ENTRY", "EXAMPLE_CURIOSITY"} <= set(ids)
    assert {entry.id for entry in ENTRIES} <= set(ids)


def test_entry_fields_are_derived_from_documents(example_mod: Path) -> None:
    context = _context(example_mod)

    assert context.entries["EXAMPLE_ENTRY"] == Entry(
        id="EXAMPLE_ENTRY",
        astro_object="EXAMPLE_PLANET",
        name="Example Entry",
        position=(10.0, -5.0),
        parent=None,
        is_curiosity=False,
        curiosity="EXAMPLE_CURIOSITY",
        sources=(),
    )
    assert context.entries["EXAMPLE_CHILD_ENTRY"].to_dict() == {
        "id": "EXAMPLE_CHILD_ENTRY",
        "astroObject": "EXAMPLE_PLANET",
        "position": None,
        "name": "Example Child",
        "parent": "EXAMPLE_ENTRY",
        "isCuriosity": False,
        "sources": ["EXAMPLE_ENTRY"],
        "curiosity": None,
    }
    assert context.entries["EXAMPLE_CURIOSITY"].is_curiosity is True


def test_planet_without_star_system_maps_to_solar_system(
    write_mod: Callable[[dict[str, str]], Path],
) -> None:
    root = write_mod(
        {
            "planets/Home.json": json.dumps({"ShipLog": {"xmlFile": "planets/home.xml"}}),
            "planets/home.xml": (
                "<AstroObjectEntry><ID>HOME</ID>"
                "<Entry><ID>HOME_ENTRY</ID></Entry></AstroObjectEntry>"
            ),
        }
    )

    context = _context(root)
    entries = context.entries_for_system("SolarSystem")

    assert entries is not None
    home = next(entry for entry in entries if entry.id == "HOME_ENTRY")
    assert home.name == "Unnamed Entry"
    assert context.entries_for_system("ExampleSystem") is None


def test_project_entries_shadow_baseline_entries(
    write_mod: Callable[[dict[str, str]], Path],
) -> None:
    root = write_mod(
        {
            "planets/Home.json": json.dumps({"ShipLog": {"xmlFile": "planets/home.xml"}}),
            "planets/home.xml": (
                "<AstroObjectEntry><ID>HOME</ID>"
                "<Entry><ID>TH_VILLAGE</ID><Name>My Village</Name></Entry></AstroObjectEntry>"
            ),
        }
    )

    entry = _context(root).entries["TH_VILLAGE"]

    assert entry.name == "My Village"
    assert entry.astro_object == "HOME"


def test_parent_cycles_are_cut() -> None:
    context = ShipLogContext(
        entries={
            "A": Entry(id="A", astro_object="P", name="A", parent="B"),
            "B": Entry(id="B", astro_object="P", name="B", parent="A"),
        }
    )

    context.merge_baseline()

    assert context.entries["A"].parent == "B"
    assert context.entries["B"].parent is None
