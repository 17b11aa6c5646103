from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

EXAMPLE_SHIP_LOG = "\n".join(
    [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<AstroObjectEntry>",
        "    <ID>EXAMPLE_PLANET</ID>",
        "    <Entry>",
        "        <ID>EXAMPLE_ENTRY</ID>",
        "        <Name>Example Entry</Name>",
        "        <Curiosity>EXAMPLE_CURIOSITY</Curiosity>",
        "        <ExploreFact>",
        "            <ID>EXAMPLE_EXPLORE_FACT</ID>",
        "            <Text>Found it.</Text>",
        "        </ExploreFact>",
        "        <Entry>",
        "            <ID>EXAMPLE_CHILD_ENTRY</ID>",
        "            <Name>Example Child</Name>",
        "            <RumorFact>",
        "                <ID>EXAMPLE_RUMOR_FACT</ID>",
        "                <SourceID>EXAMPLE_ENTRY</SourceID>",
        "                <Text>Heard about it.</Text>",
        "            </RumorFact>",
        "        </Entry>",
        "    </Entry>",
        "    <Entry>",
        "        <ID>EXAMPLE_CURIOSITY</ID>",
        "        <Name>Example Curiosity</Name>",
        "        <IsCuriosity/>",
        "    </Entry>",
        "</AstroObjectEntry>",
        "",
    ]
)

EXAMPLE_PLANET_CONFIG: dict[str, object] = {
    "name": "Example Planet",
    "starSystem": "ExampleSystem",
    "ShipLog": {"xmlFile": "planets/ShipLogs/example.xml"},
    "Props": {"dialogue": [{"xmlFile": "planets/text/dialogue.xml"}]},
}

EXAMPLE_SYSTEM_CONFIG: dict[str, object] = {
    "curiosities": [{"id": "EXAMPLE_CURIOSITY", "color": {"r": 1, "g": 0, "b": 0}}],
    "entryPositions": [{"id": "EXAMPLE_ENTRY", "position": {"x": 10, "y": -5}}],
}

EXAMPLE_DIALOGUE = "<DialogueTree><NameField>Hal</NameField></DialogueTree>\n"

ModWriter = Callable[[dict[str, str]], Path]


@pytest.fixture
def write_mod(tmp_path: Path) -> ModWriter:
    """Write relative-path -> contents pairs under tmp_path and return the root."""

    def write(files: dict[str, str]) -> Path:
        for relative, contents in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(contents, encoding="utf-8")
        return tmp_path

    return write


@pytest.fixture
def example_files() -> dict[str, str]:
    return {
        "planets/Example.json": json.dumps(EXAMPLE_PLANET_CONFIG, indent=2),
        "planets/ShipLogs/example.xml": EXAMPLE_SHIP_LOG,
        "planets/text/dialogue.xml": EXAMPLE_DIALOGUE,
        "systems/ExampleSystem.json": json.dumps(EXAMPLE_SYSTEM_CONFIG, indent=2),
    }


@pytest.fixture
def example_mod(write_mod: ModWriter, example_files: dict[str, str]) -> Path:
    return write_mod(example_files)


@pytest.fixture
def example_ship_log() -> str:
    return EXAMPLE_SHIP_LOG
