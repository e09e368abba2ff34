"""
Data file locations and official source names.

Maps an entity kind and source code to the 5etools data files that may
contain it, and official source codes to the full titles of their books.
"""

from __future__ import annotations

# Kind -> candidate data files, relative to {tools5e_url}/data/.
# "{source}" is replaced by the lowercased source code.
TAG_FILE_PATHS: dict[str, list[str]] = {
    "item": ["items.json", "items-base.json", "magicvariants.json"],
    "spell": ["spells/spells-{source}.json"],
    "creature": ["bestiary/bestiary-{source}.json"],
}

# Official source code -> full title
BUILTIN_SOURCES: dict[str, str] = {
    # Core rulebooks
    "PHB": "Player's Handbook",
    "DMG": "Dungeon Master's Guide",
    "MM": "Monster Manual",
    "XPHB": "Player's Handbook (2024)",
    "XDMG": "Dungeon Master's Guide (2024)",
    "XMM": "Monster Manual (2025)",
    # Supplements
    "SCAG": "Sword Coast Adventurer's Guide",
    "VGM": "Volo's Guide to Monsters",
    "XGE": "Xanathar's Guide to Everything",
    "MTF": "Mordenkainen's Tome of Foes",
    "TCE": "Tasha's Cauldron of Everything",
    "FTD": "Fizban's Treasury of Dragons",
    "MPMM": "Mordenkainen Presents: Monsters of the Multiverse",
    "BMT": "The Book of Many Things",
    "BGG": "Bigby Presents: Glory of the Giants",
    "SCC": "Strixhaven: A Curriculum of Chaos",
    "AI": "Acquisitions Incorporated",
    "EGW": "Explorer's Guide to Wildemount",
    "ERLW": "Eberron: Rising from the Last War",
    "GGR": "Guildmasters' Guide to Ravnica",
    "MOT": "Mythic Odysseys of Theros",
    "VRGR": "Van Richten's Guide to Ravenloft",
    "EEPC": "Elemental Evil Player's Companion",
    "SAiS": "Spelljammer: Adventures in Space",
    "AAG": "Astral Adventurer's Guide",
    "BAM": "Boo's Astral Menagerie",
    "SRD": "Systems Reference Document",
    # Adventures
    "LMoP": "Lost Mine of Phandelver",
    "HotDQ": "Hoard of the Dragon Queen",
    "RoT": "The Rise of Tiamat",
    "PotA": "Princes of the Apocalypse",
    "OotA": "Out of the Abyss",
    "CoS": "Curse of Strahd",
    "SKT": "Storm King's Thunder",
    "TftYP": "Tales from the Yawning Portal",
    "ToA": "Tomb of Annihilation",
    "WDH": "Waterdeep: Dragon Heist",
    "WDMM": "Waterdeep: Dungeon of the Mad Mage",
    "BGDIA": "Baldur's Gate: Descent Into Avernus",
    "IDRotF": "Icewind Dale: Rime of the Frostmaiden",
    "WBtW": "The Wild Beyond the Witchlight",
    "CRCotN": "Critical Role: Call of the Netherdeep",
    "JttRC": "Journeys through the Radiant Citadel",
    "DSotDQ": "Dragonlance: Shadow of the Dragon Queen",
    "PaBTSO": "Phandelver and Below: The Shattered Obelisk",
    "VEoR": "Vecna: Eve of Ruin",
}

_BUILTIN_SOURCES_LOWER: dict[str, str] = {
    code.lower(): name for code, name in BUILTIN_SOURCES.items()
}


def candidate_paths(kind: str, source: str) -> list[str]:
    """Return the data files that may hold entities of ``kind`` from ``source``.

    Returns an empty list for kinds with no known data files; callers treat
    that as "kind not supported", not as a failure.
    """
    templates = TAG_FILE_PATHS.get(kind.lstrip("@").lower(), [])
    source = source.lower()
    return [template.format(source=source) for template in templates]


def source_full_name(code: str) -> str | None:
    """Full title of an official source, matched case-insensitively."""
    return _BUILTIN_SOURCES_LOWER.get(code.lower())
