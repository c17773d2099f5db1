# co2survey/mappings.py
"""Ordered lookup tables from survey free text to canonical labels / proxies.

Every table is a tuple of ``(key, result)`` pairs scanned in declared order;
the first key contained in the normalized answer wins. Keys overlap on
purpose ("plugin hybrid" contains "hybrid"), so more specific keys must be
declared before the general ones they contain.
"""
import logging
import math
import re
from typing import Any, Optional, Sequence, Tuple, TypeVar

from .normalizer import normalize_enum, normalize_text, to_number

logger = logging.getLogger(__name__)

T = TypeVar("T")
OrderedTable = Sequence[Tuple[str, T]]

UNKNOWN = "UNKNOWN"

# Canonical labels; must match the factor table exactly.
PKW_BENZIN = "PKW Benzin"
PKW_DIESEL = "PKW Diesel"
HYBRID_HEV = "Hybrid HEV"
PLUGIN_HYBRID_PHEV = "PlugInHybrid PHEV"
ELEKTROAUTO_BEV = "Elektroauto BEV EU Strommix"
OEPNV_BUS = "ÖPNV Bus Diesel"
OEPNV_BAHN = "ÖPNV Bahn/Tram"
FAHRRAD = "Fahrrad"
E_BIKE = "E-Bike/E-Roller"
ZU_FUSS = "Zu Fuß"

FLIGHT_SHORT = "Flugreisen Kurzstrecke (<1500 km)"
FLIGHT_MEDIUM = "Flugreisen Mittelstrecke (1500–3500 km)"
FLIGHT_LONG = "Flugreisen Langstrecke (>3500 km)"

ERDGAS = "Erdgas (Brennwert)"
HEIZOEL = "Heizöl extra leicht"
PELLETS = "Biomasse Pellets"
STUECKHOLZ = "Biomasse Stückholz"
FERNWAERME = "Fernwärme Ø Österreich"
WAERMEPUMPE = "Wärmepumpe (EU-Strommix, JAZ 3)"
SOLARTHERMIE = "Solarthermie"
OEKOSTROM = "Ökostrom"
STROM_MIX = "Strom Ö-Mix"

# Whitespace is removed from the answer before matching these.
DISTANCE_MAP: OrderedTable[float] = (
    ("<10", 5),
    ("10-20", 15),
    ("20-30", 25),
    ("30-40", 35),
    ("40-50", 45),
    ("50-60", 55),
    (">60", 80),
)

ALT_FREQ_MAP: OrderedTable[float] = (
    ("oft", 1 / 3),
    ("selten", 0.1),
    ("manchmal", 1 / 30),
    ("nie", 0),
)

# "5-10" contains "0", so the zero bucket goes last.
FLIGHT_COUNT_MAP: OrderedTable[float] = (
    ("5-10", 7),
    ("1-2", 1.9),
    ("2-5", 3.2),
    ("0", 0),
)

FLIGHT_DISTANCE_MAP: OrderedTable[str] = (
    ("kurzstrecke", FLIGHT_SHORT),
    ("mittelstrecke", FLIGHT_MEDIUM),
    ("langstrecke", FLIGHT_LONG),
)

# One-way km per flight label; display only, never part of the sum.
FLIGHT_DISTANCE_KM = {
    FLIGHT_SHORT: 750,
    FLIGHT_MEDIUM: 2500,
    FLIGHT_LONG: 5000,
}

TRANSPORT_MAP: OrderedTable[str] = (
    ("pkw benzin", PKW_BENZIN),
    ("auto benzin", PKW_BENZIN),
    ("pkw diesel", PKW_DIESEL),
    ("auto diesel", PKW_DIESEL),
    ("plugin hybrid", PLUGIN_HYBRID_PHEV),
    ("plug in hybrid", PLUGIN_HYBRID_PHEV),
    ("plug-in hybrid", PLUGIN_HYBRID_PHEV),
    ("hybrid", HYBRID_HEV),
    ("ebike", E_BIKE),
    ("e bike", E_BIKE),
    ("e-bike", E_BIKE),
    ("roller", E_BIKE),
    ("elektro", ELEKTROAUTO_BEV),
    ("eauto", ELEKTROAUTO_BEV),
    ("e auto", ELEKTROAUTO_BEV),
    ("e-auto", ELEKTROAUTO_BEV),
    ("firmenwagen", PKW_BENZIN),
    ("bus", OEPNV_BUS),
    ("offis", OEPNV_BAHN),
    ("oeffis", OEPNV_BAHN),
    ("zug", OEPNV_BAHN),
    ("bahn", OEPNV_BAHN),
    ("tram", OEPNV_BAHN),
    ("fahrrad", FAHRRAD),
    ("bike", FAHRRAD),
    ("zu fuss", ZU_FUSS),
    ("zu fuß", ZU_FUSS),
    ("gehen", ZU_FUSS),
)

CAR_TYPE_MAP: OrderedTable[str] = (
    ("benzin", PKW_BENZIN),
    ("diesel", PKW_DIESEL),
    ("plugin hybrid", PLUGIN_HYBRID_PHEV),
    ("plug in hybrid", PLUGIN_HYBRID_PHEV),
    ("plug-in hybrid", PLUGIN_HYBRID_PHEV),
    ("hybrid", HYBRID_HEV),
    ("elektro", ELEKTROAUTO_BEV),
)

# "ol" is a substring of "solar" and "holz"; those go first.
HEATING_MAP: OrderedTable[str] = (
    ("erdgas", ERDGAS),
    ("gas", ERDGAS),
    ("heizol", HEIZOEL),
    ("pellets", PELLETS),
    ("stuckholz", STUECKHOLZ),
    ("holz", STUECKHOLZ),
    ("fernwarme", FERNWAERME),
    ("warmepumpe", WAERMEPUMPE),
    ("solar", SOLARTHERMIE),
    ("okostrom", OEKOSTROM),
    ("strom", STROM_MIX),
    ("ol", HEIZOEL),
)

WARM_WATER_MAP: OrderedTable[str] = (
    ("gas", ERDGAS),
    ("erdgas", ERDGAS),
    ("heizol", HEIZOEL),
    ("strom", STROM_MIX),
    ("warmepumpe", WAERMEPUMPE),
    ("solar", SOLARTHERMIE),
    ("ol", HEIZOEL),
)

_FIRST_INTEGER = re.compile(r"\d+")


def match_first(norm: str, mapping: OrderedTable[T], default: Optional[T] = None) -> Optional[T]:
    """Return the result of the first key contained in an already normalized string."""
    for needle, result in mapping:
        if needle in norm:
            return result
    return default


def pick_by_includes(text: Any, mapping: OrderedTable[T], default: Optional[T] = None) -> Optional[T]:
    return match_first(normalize_enum(text), mapping, default)


def parse_office_days(text: Any) -> int:
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        number = to_number(text)
        text = "" if number is None else str(int(number))
    found = _FIRST_INTEGER.search(normalize_enum(text))
    if found:
        days = int(found.group(0))
        if 0 <= days <= 7:
            return days
    return 0


def parse_distance_km(text: Any) -> float:
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        # a numeric answer is already in km
        number = to_number(text)
        return number if number is not None and number > 0 else 0
    norm = re.sub(r"\s", "", normalize_text(text))
    return match_first(norm, DISTANCE_MAP, 0)


def parse_alt_freq(text: Any) -> Optional[float]:
    return pick_by_includes(text, ALT_FREQ_MAP)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_flights_per_year(text: Any) -> Optional[int]:
    """Expected flights per year, rounded to a whole number.

    Plain numbers ("3", "2,5" or a numeric cell) are taken as they are.
    Bucket answers ("1-2") use the table proxy. Unparseable answers give None.
    """
    number = to_number(text)
    if number is None:
        norm = re.sub(r"\s", "", normalize_enum(text))
        number = match_first(norm, FLIGHT_COUNT_MAP)
        found = _FIRST_INTEGER.search(norm)
        # the zero key also sits inside "10", "20" and ">10"
        if number == 0 and found:
            number = int(found.group(0))
        if number is None:
            if norm:
                logger.debug("unresolved flight count %r", text)
            return None
    return round_half_up(number)


def parse_transport(main_text: Any, car_type_text: Any = None) -> Optional[str]:
    """Main commute label; the car type is only consulted when the main text fails."""
    return pick_by_includes(main_text, TRANSPORT_MAP) or pick_by_includes(car_type_text, CAR_TYPE_MAP)


def parse_flight_distance(text: Any) -> Optional[str]:
    return pick_by_includes(text, FLIGHT_DISTANCE_MAP)


def flight_distance_km(label: Optional[str]) -> Optional[int]:
    if not label:
        return None
    return FLIGHT_DISTANCE_KM.get(label)


def parse_heating(text: Any) -> Optional[str]:
    return pick_by_includes(text, HEATING_MAP)


def parse_warm_water(text: Any) -> Optional[str]:
    return pick_by_includes(text, WARM_WATER_MAP)
