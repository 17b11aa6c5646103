"""Static base-game ship log dataset.

Project documents may reference these ids without declaring them, and must
not declare entries or facts that reuse them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class BaselineEntry:
    """One ship log entry shipped with the base game."""

    id: str
    astro_object: str
    name: str
    parent: str | None = None
    curiosity: str | None = None
    is_curiosity: bool = False


BUILTIN_CURIOSITIES: tuple[str, ...] = (
    "TIME_LOOP",
    "SUNKEN_MODULE",
    "VESSEL",
    "QUANTUM_MOON",
    "INVISIBLE_PLANET",
    "COMET_CORE",
)

ASTRO_OBJECT_IDS: tuple[str, ...] = (
    "TIMBER_HEARTH",
    "TIMBER_MOON",
    "CAVE_TWIN",
    "TOWER_TWIN",
    "BRITTLE_HOLLOW",
    "VOLCANIC_MOON",
    "WHITE_HOLE",
    "GIANTS_DEEP",
    "ORBITAL_PROBE_CANNON",
    "DARK_BRAMBLE",
    "COMET",
    "QUANTUM_MOON",
    "INVISIBLE_PLANET",
    "SUN_STATION",
)

ENTRIES: tuple[BaselineEntry, ...] = (
    BaselineEntry("TH_VILLAGE", "TIMBER_HEARTH", "Village"),
    BaselineEntry("TH_ZERO_G_CAVE", "TIMBER_HEARTH", "Zero-G Cave"),
    BaselineEntry("TH_IMPACT_CRATER", "TIMBER_HEARTH", "Impact Crater"),
    BaselineEntry("TH_RADIO_TOWER", "TIMBER_HEARTH", "Radio Tower"),
    BaselineEntry(
        "TH_NOMAI_MINE", "TIMBER_HEARTH", "Nomai Mine", curiosity="QUANTUM_MOON"
    ),
    BaselineEntry(
        "TH_QUANTUM_SHARD",
        "TIMBER_HEARTH",
        "Quantum Shard",
        parent="TH_NOMAI_MINE",
        curiosity="QUANTUM_MOON",
    ),
    BaselineEntry("TM_NORTH_POLE", "TIMBER_MOON", "North Pole", curiosity="VESSEL"),
    BaselineEntry(
        "TM_EYE_LOCATOR",
        "TIMBER_MOON",
        "Eye Signal Locator",
        parent="TM_NORTH_POLE",
        curiosity="VESSEL",
    ),
    BaselineEntry("CT_SUNLESS_CITY", "CAVE_TWIN", "Sunless City", curiosity="TIME_LOOP"),
    BaselineEntry(
        "CT_HIGH_ENERGY_LAB",
        "CAVE_TWIN",
        "High Energy Lab",
        parent="CT_SUNLESS_CITY",
        curiosity="TIME_LOOP",
    ),
    BaselineEntry(
        "CT_ANGLERFISH_FOSSIL", "CAVE_TWIN", "Anglerfish Fossil", parent="CT_SUNLESS_CITY"
    ),
    BaselineEntry(
        "CT_QUANTUM_MOON_LOCATOR", "CAVE_TWIN", "Quantum Moon Locator", curiosity="QUANTUM_MOON"
    ),
    BaselineEntry(
        "TT_TIME_LOOP_DEVICE",
        "TOWER_TWIN",
        "Ash Twin Project",
        curiosity="TIME_LOOP",
        is_curiosity=True,
    ),
    BaselineEntry("TT_WARP_TOWERS", "TOWER_TWIN", "Warp Towers", curiosity="TIME_LOOP"),
    BaselineEntry("BH_HANGING_CITY", "BRITTLE_HOLLOW", "Hanging City"),
    BaselineEntry("BH_BLACK_HOLE_FORGE", "BRITTLE_HOLLOW", "Black Hole Forge"),
    BaselineEntry(
        "BH_OBSERVATORY", "BRITTLE_HOLLOW", "Southern Observatory", curiosity="COMET_CORE"
    ),
    BaselineEntry("BH_GRAVITY_CANNON", "BRITTLE_HOLLOW", "Gravity Cannon"),
    BaselineEntry(
        "BH_QUANTUM_RESEARCH_TOWER",
        "BRITTLE_HOLLOW",
        "Tower of Quantum Knowledge",
        curiosity="QUANTUM_MOON",
    ),
    BaselineEntry("VM_VOLCANO", "VOLCANIC_MOON", "Volcano Summit"),
    BaselineEntry("WHS_WHITE_HOLE_STATION", "WHITE_HOLE", "White Hole Station"),
    BaselineEntry("GD_OCEAN", "GIANTS_DEEP", "Ocean Depths"),
    BaselineEntry("GD_CONSTRUCTION_YARD", "GIANTS_DEEP", "Construction Yard"),
    BaselineEntry("GD_STATUE_WORKSHOP", "GIANTS_DEEP", "Statue Workshop"),
    BaselineEntry("GD_BRAMBLE_ISLAND", "GIANTS_DEEP", "Bramble Island"),
    BaselineEntry(
        "GD_QUANTUM_TOWER", "GIANTS_DEEP", "Tower of Quantum Trials", curiosity="QUANTUM_MOON"
    ),
    BaselineEntry("OPC_LAUNCH_MODULE", "ORBITAL_PROBE_CANNON", "Launch Module"),
    BaselineEntry(
        "OPC_SUNKEN_MODULE",
        "ORBITAL_PROBE_CANNON",
        "Probe Tracking Module",
        curiosity="SUNKEN_MODULE",
        is_curiosity=True,
    ),
    BaselineEntry("DB_FROZEN_JELLYFISH", "DARK_BRAMBLE", "Frozen Jellyfish"),
    BaselineEntry("DB_ESCAPE_POD", "DARK_BRAMBLE", "Escape Pod 3"),
    BaselineEntry("DB_NOMAI_GRAVE", "DARK_BRAMBLE", "Nomai Grave", curiosity="VESSEL"),
    BaselineEntry(
        "DB_VESSEL", "DARK_BRAMBLE", "Vessel", curiosity="VESSEL", is_curiosity=True
    ),
    BaselineEntry("COMET_SHUTTLE", "COMET", "Nomai Shuttle", curiosity="COMET_CORE"),
    BaselineEntry(
        "COMET_INTERIOR",
        "COMET",
        "Interloper Core",
        curiosity="COMET_CORE",
        is_curiosity=True,
    ),
    BaselineEntry(
        "QM_SHUTTLE", "QUANTUM_MOON", "Nomai Shuttle", curiosity="QUANTUM_MOON"
    ),
    BaselineEntry(
        "QM_SIXTH_LOCATION",
        "QUANTUM_MOON",
        "Sixth Location",
        curiosity="QUANTUM_MOON",
        is_curiosity=True,
    ),
    BaselineEntry(
        "IP_RING_WORLD",
        "INVISIBLE_PLANET",
        "Stranger",
        curiosity="INVISIBLE_PLANET",
        is_curiosity=True,
    ),
    BaselineEntry(
        "IP_DREAM_LAKE", "INVISIBLE_PLANET", "Dream Lake", parent="IP_RING_WORLD"
    ),
    BaselineEntry("S_SUNSTATION", "SUN_STATION", "Sun Station"),
)

RESERVED_ENTRY_IDS: frozenset[str] = frozenset(entry.id for entry in ENTRIES)

# Base-game facts follow the <ENTRY>_R<n> (rumor) / <ENTRY>_X<n> (explore) scheme.
RESERVED_FACT_IDS: frozenset[str] = frozenset(
    f"{entry.id}_{kind}{index}"
    for entry in ENTRIES
    for kind in ("R", "X")
    for index in (1, 2, 3)
)
