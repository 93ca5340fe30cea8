"""
Conflict catalog
================

The static list of conflicts the map knows about. Each entry names the
countries whose metric rows belong to the conflict; the aggregator uses that
membership to group rows.

The catalog can also be loaded from a JSON array (see `load_catalog_json`),
using the camelCase keys of the web data files:

    [{"id": "...", "name": "...", "countries": [...], "primaryActors": [...],
      "startDate": "YYYY-MM-DD", "location": {"lat": .., "lng": ..},
      "type": "insurgency", "description": "...", "background": "..."}]
"""

from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Mapping, Sequence, Tuple
from .models import ConflictDefinition, Location

logger = logging.getLogger(__name__)

CONFLICT_TYPES = ("interstate", "territorial", "civil war", "insurgency", "criminal violence")

_CONFLICTS: List[Dict[str, Any]] = [
    {
        "id": "ukraine-russia",
        "name": "Russia-Ukraine War",
        "countries": ["Ukraine", "Russia"],
        "description": "Full-scale Russian invasion of Ukraine that began on February 24, 2022, escalating the conflict that started with the 2014 annexation of Crimea and the war in Donbas.",
        "primary_actors": ["Russian Armed Forces", "Ukrainian Armed Forces", "Wagner Group", "International volunteers"],
        "start_date": "2022-02-24",
        "location": (49.0139, 31.2858),
        "type": "interstate",
        "background": "Tensions escalated after the 2014 Ukrainian Revolution, the annexation of Crimea and the Russian-backed separatist states in eastern Ukraine.",
    },
    {
        "id": "israel-palestine",
        "name": "Israel-Palestine Conflict",
        "countries": ["Israel", "Palestine", "Lebanon"],
        "description": "Long-standing conflict over territorial claims and self-determination, escalated after the October 7, 2023 attack, the military response in Gaza and the front in Lebanon.",
        "primary_actors": ["Israel Defense Forces", "Hamas", "Hezbollah", "Palestinian Islamic Jihad"],
        "start_date": "1948-05-14",
        "location": (31.5, 34.8),
        "type": "territorial",
        "background": "Historical dispute over land in the former British Mandate of Palestine, alternating between negotiations and violent escalation.",
    },
    {
        "id": "syria-civil-war",
        "name": "Syrian Civil War",
        "countries": ["Syria"],
        "description": "Multi-sided civil war that grew out of the 2011 protests, involving the government, opposition groups, jihadist organizations and foreign militaries.",
        "primary_actors": ["Syrian Armed Forces", "Syrian Opposition", "Islamic State", "Kurdish Forces", "Foreign militaries"],
        "start_date": "2011-03-15",
        "location": (35.0, 38.0),
        "type": "civil war",
        "background": "Protests against the government evolved into a proxy war with involvement from Russia, Iran, Turkey, the United States and others.",
    },
    {
        "id": "myanmar-civil-war",
        "name": "Myanmar Civil War",
        "countries": ["Myanmar"],
        "description": "Civil conflict that intensified after the 2021 military coup, with ethnic armed organizations and pro-democracy forces fighting the junta.",
        "primary_actors": ["Myanmar Military (Tatmadaw)", "People's Defense Forces", "Ethnic Armed Organizations"],
        "start_date": "2021-02-01",
        "location": (21.9162, 95.9560),
        "type": "civil war",
        "background": "Conflict has recurred since independence in 1948 and escalated sharply after the 2021 coup.",
    },
    {
        "id": "sahel-insurgency",
        "name": "Sahel Insurgency",
        "countries": ["Mali", "Niger", "Burkina Faso", "Chad"],
        "description": "Jihadist insurgency across the Sahel marked by armed attacks, ethnic violence and competition for resources.",
        "primary_actors": ["JNIM", "Islamic State in the Greater Sahara", "National Armed Forces", "Russian mercenaries"],
        "start_date": "2012-01-16",
        "location": (14.5, 0.0),
        "type": "insurgency",
        "background": "Began after the collapse of Libya and a Tuareg rebellion in Mali; several coups have since reshaped regional alliances.",
    },
    {
        "id": "sudan-conflict",
        "name": "Sudanese Armed Conflict",
        "countries": ["Sudan", "South Sudan"],
        "description": "War between the Sudanese Armed Forces and the Rapid Support Forces that erupted in April 2023, causing a severe humanitarian crisis.",
        "primary_actors": ["Sudanese Armed Forces", "Rapid Support Forces", "Regional militias"],
        "start_date": "2023-04-15",
        "location": (12.8628, 30.2176),
        "type": "civil war",
        "background": "Power struggles between military factions during the transition after 2019 turned into open warfare.",
    },
    {
        "id": "yemen-civil-war",
        "name": "Yemen Civil War",
        "countries": ["Yemen"],
        "description": "Civil war with regional involvement that produced one of the world's worst humanitarian crises.",
        "primary_actors": ["Houthi Movement", "Yemeni Government", "Southern Transitional Council", "Saudi-led Coalition"],
        "start_date": "2014-09-21",
        "location": (15.5527, 48.5164),
        "type": "civil war",
        "background": "Houthi forces seized the northwest including Sanaa; a Saudi-led coalition intervened in 2015.",
    },
    {
        "id": "drc-conflict",
        "name": "DRC Eastern Conflict",
        "countries": ["Democratic Republic of Congo"],
        "description": "Long-running conflict in eastern DRC involving dozens of armed groups fighting over land and minerals.",
        "primary_actors": ["Armed Forces of the DRC", "M23 Movement", "FDLR", "Local militias"],
        "start_date": "1996-10-24",
        "location": (-1.6734, 29.2399),
        "type": "civil war",
        "background": "Continuous conflict since the aftermath of the Rwandan genocide despite several peace agreements.",
    },
    {
        "id": "ethiopia-tigray",
        "name": "Ethiopian Conflicts",
        "countries": ["Ethiopia"],
        "description": "Civil conflict that began in Tigray in 2020 and spread to Amhara and Oromia.",
        "primary_actors": ["Ethiopian National Defense Force", "Tigray Defense Forces", "Oromo Liberation Army", "Amhara militias"],
        "start_date": "2020-11-04",
        "location": (9.1450, 40.4897),
        "type": "civil war",
        "background": "A 2022 peace agreement ended the Tigray war but fighting continues in other regions.",
    },
    {
        "id": "somalia-insurgency",
        "name": "Somali Insurgency",
        "countries": ["Somalia"],
        "description": "Insurgency by Al-Shabaab against the Federal Government of Somalia and African Union forces.",
        "primary_actors": ["Federal Government of Somalia", "Al-Shabaab", "African Union forces"],
        "start_date": "2006-12-24",
        "location": (5.1521, 46.1996),
        "type": "insurgency",
        "background": "Al-Shabaab has fought the internationally backed government since 2006.",
    },
    {
        "id": "mexico-cartel-violence",
        "name": "Mexican Drug War",
        "countries": ["Mexico"],
        "description": "Asymmetric conflict between the Mexican state and drug trafficking organizations, and between rival cartels.",
        "primary_actors": ["Mexican government forces", "Sinaloa Cartel", "Jalisco New Generation Cartel", "Gulf Cartel"],
        "start_date": "2006-12-11",
        "location": (23.6345, -102.5528),
        "type": "criminal violence",
        "background": "Escalated when federal troops were deployed against the cartels in 2006, fragmenting them into rival groups.",
    },
    {
        "id": "afghanistan-taliban",
        "name": "Afghanistan Conflict",
        "countries": ["Afghanistan", "Pakistan"],
        "description": "Insurgency against Taliban rule by ISIS-K and resistance forces after the 2021 takeover.",
        "primary_actors": ["Taliban government", "Islamic State Khorasan Province", "National Resistance Front", "Pakistan Taliban (TTP)"],
        "start_date": "2021-08-15",
        "location": (33.9391, 67.7100),
        "type": "insurgency",
        "background": "After the US withdrawal in 2021, violence continues alongside economic collapse.",
    },
    {
        "id": "cameroon-ambazonia",
        "name": "Cameroonian Conflicts",
        "countries": ["Cameroon"],
        "description": "Anglophone separatist insurgency in the west and Boko Haram attacks in the north.",
        "primary_actors": ["Government of Cameroon", "Ambazonia separatists", "Boko Haram"],
        "start_date": "2017-09-22",
        "location": (7.3697, 12.3547),
        "type": "insurgency",
        "background": "Protests in English-speaking regions in 2016 escalated into armed conflict after a crackdown.",
    },
    {
        "id": "mozambique-insurgency",
        "name": "Mozambique Insurgency",
        "countries": ["Mozambique"],
        "description": "Islamist insurgency in Cabo Delgado province with links to the Islamic State.",
        "primary_actors": ["Mozambique Armed Forces", "Islamist insurgents", "SADC forces", "Rwandan forces"],
        "start_date": "2017-10-05",
        "location": (-12.3333, 39.3333),
        "type": "insurgency",
        "background": "Began in 2017 in a gas-rich but poor province; foreign forces helped retake some areas.",
    },
    {
        "id": "haiti-gang-violence",
        "name": "Haitian Gang Crisis",
        "countries": ["Haiti"],
        "description": "Gang violence and political instability after the 2021 assassination of President Jovenel Moise.",
        "primary_actors": ["G9 gang alliance", "400 Mawozo", "Government of Haiti", "Multinational Security Support Mission"],
        "start_date": "2021-07-07",
        "location": (18.9712, -72.2852),
        "type": "criminal violence",
        "background": "Gangs expanded control over Port-au-Prince, causing displacement and kidnappings.",
    },
    {
        "id": "nigeria-conflicts",
        "name": "Nigerian Conflicts",
        "countries": ["Nigeria"],
        "description": "Boko Haram insurgency in the northeast, banditry in the northwest and farmer-herder clashes in the Middle Belt.",
        "primary_actors": ["Nigerian Armed Forces", "Boko Haram", "ISWAP", "Bandits", "Farmer/herder militias"],
        "start_date": "2009-07-26",
        "location": (9.0820, 8.6753),
        "type": "insurgency",
        "background": "Overlapping security crises since the 2009 Boko Haram uprising.",
    },
    {
        "id": "colombia-armed-conflict",
        "name": "Colombian Armed Conflict",
        "countries": ["Colombia", "Venezuela"],
        "description": "Conflict involving government forces, ELN rebels, FARC dissidents and criminal groups despite the 2016 peace agreement.",
        "primary_actors": ["Colombian Armed Forces", "ELN", "FARC dissidents", "Gulf Clan"],
        "start_date": "1964-05-27",
        "location": (4.5709, -74.2973),
        "type": "insurgency",
        "background": "Violence is concentrated in border regions and areas with illegal economies.",
    },
    {
        "id": "brazil-criminal-violence",
        "name": "Brazilian Gang Violence",
        "countries": ["Brazil"],
        "description": "Criminal violence driven by prison-based gangs and militias competing over trafficking routes.",
        "primary_actors": ["Primeiro Comando da Capital (PCC)", "Comando Vermelho", "Militias", "Brazilian security forces"],
        "start_date": "2006-05-12",
        "location": (-14.2350, -51.9253),
        "type": "criminal violence",
        "background": "Prison gangs grew into criminal enterprises controlling urban territory and trafficking routes.",
    },
    {
        "id": "india-maoist",
        "name": "India's Naxalite-Maoist Insurgency",
        "countries": ["India"],
        "description": "Maoist insurgency in rural and tribal areas of eastern and central India.",
        "primary_actors": ["Indian security forces", "Communist Party of India (Maoist)"],
        "start_date": "1967-05-25",
        "location": (20.5937, 80.9629),
        "type": "insurgency",
        "background": "Stems from a 1967 peasant uprising in resource-rich but underdeveloped regions.",
    },
    {
        "id": "pakistan-militancy",
        "name": "Pakistan's Militant Conflicts",
        "countries": ["Pakistan"],
        "description": "Pakistani Taliban resurgence in the northwest, Baloch separatism in the southwest and sectarian violence.",
        "primary_actors": ["Pakistani security forces", "Tehrik-i-Taliban Pakistan (TTP)", "Balochistan Liberation Army", "Islamic State Khorasan"],
        "start_date": "2007-07-10",
        "location": (30.3753, 69.3451),
        "type": "insurgency",
        "background": "Militancy along the Afghan border, separatist violence in Balochistan and sectarian attacks.",
    },
]

def _first(entry: Mapping[str, Any], *keys: str) -> Any:
    """First non-null value among `keys` (snake_case or camelCase), else None."""
    for k in keys:
        if entry.get(k) is not None:
            return entry[k]
    return None

def _text(value: Any) -> str:
    return "" if value is None else str(value)

def _definition(entry: Mapping[str, Any]) -> ConflictDefinition:
    if not isinstance(entry, Mapping):
        raise ValueError(f"Conflict entry must be an object, got {type(entry).__name__}")
    missing = [k for k in ("id", "name", "countries", "location", "type") if entry.get(k) is None]
    if missing:
        raise ValueError(f"Conflict {entry.get('id')!r} is missing required keys: {', '.join(missing)}")

    loc = entry["location"]
    try:
        if isinstance(loc, Mapping):
            location = Location(lat=float(loc["lat"]), lng=float(loc["lng"]))
        else:
            location = Location(lat=float(loc[0]), lng=float(loc[1]))
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ValueError(f"Conflict {entry['id']!r} has a malformed location: {loc!r}") from e

    if not isinstance(entry["countries"], (list, tuple)):
        raise ValueError(f"Conflict {entry['id']!r} countries must be a list")
    countries = tuple(str(c).strip() for c in entry["countries"])
    if not countries:
        raise ValueError(f"Conflict {entry['id']!r} has no countries")
    return ConflictDefinition(
        id=str(entry["id"]),
        name=str(entry["name"]),
        countries=countries,
        description=_text(entry.get("description")),
        primary_actors=tuple(_first(entry, "primary_actors", "primaryActors") or ()),
        start_date=_text(_first(entry, "start_date", "startDate")),
        location=location,
        type=str(entry["type"]),
        background=_text(entry.get("background")),
    )

def build_catalog(entries: Sequence[Mapping[str, Any]]) -> Tuple[ConflictDefinition, ...]:
    """Convert raw entries into definitions; ids must be unique."""
    out: List[ConflictDefinition] = []
    seen = set()
    for entry in entries:
        d = _definition(entry)
        if d.id in seen:
            raise ValueError(f"Duplicate conflict id: {d.id!r}")
        if d.type not in CONFLICT_TYPES:
            logger.warning("Conflict %s has an unrecognised type %r", d.id, d.type)
        seen.add(d.id)
        out.append(d)
    return tuple(out)

def load_catalog_json(path: str) -> Tuple[ConflictDefinition, ...]:
    """Load a catalog from a JSON file holding an array of definitions."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError("Conflict catalog must be a JSON array")
    return build_catalog(data)

# Built once at import; ConflictDefinition is immutable so sharing is safe.
CONFLICT_DEFINITIONS: Tuple[ConflictDefinition, ...] = build_catalog(_CONFLICTS)
