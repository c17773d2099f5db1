# co2survey/calculation.py
"""CO2 footprint of one survey response.

Raw answer strings are mapped once into ``ParsedSurveyInputs`` by
``normalize_and_map``; ``compute_breakdown`` / ``compute_total`` turn those
plus the factor table into kilograms CO2 per year. Both are pure: no I/O,
no shared state, and no exceptions for unresolvable data. An unresolved
field stays ``None`` here and simply zeroes the sub-estimate that needs it.
"""
import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, Mapping, Optional

from . import mappings
from .factors import ENERGY_DEMAND_WARM_WATER, factor_value, find_factor
from .normalizer import to_number, to_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawSurveyAnswers:
    """Answers as they come out of the form or the spreadsheet.

    Mostly strings; numeric spreadsheet cells stay numbers.
    """

    office_days: Any = None
    transport_main: Any = None
    alternative_transport_freq: Any = None
    alternative_transport: Any = None
    distance: Any = None
    car_type: Any = None
    flights_per_year: Any = None
    flight_distance: Any = None
    heating_type: Any = None
    warm_water_type: Any = None
    uses_green_electricity: Any = None
    smart_electricity_usage: Any = None
    fireworks_per_year: Any = None
    co2_importance: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RawSurveyAnswers":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ParsedSurveyInputs:
    office_days: int = 0
    distance_km: float = 0
    main_transport: Optional[str] = None
    alternative_transport: Optional[str] = None
    alternative_frequency: Optional[float] = None
    car_type: Optional[str] = None
    flights_per_year: Optional[int] = None
    flight_distance_label: Optional[str] = None
    flight_distance_km: Optional[int] = None
    heating_type: Optional[str] = None
    warm_water_type: Optional[str] = None
    uses_green_electricity: Optional[str] = None
    smart_electricity_usage: Optional[float] = None
    fireworks_per_year: Optional[float] = None
    co2_importance: Optional[float] = None


@dataclass(frozen=True)
class Co2Breakdown:
    commute_kg: float = 0.0
    flight_kg: float = 0.0
    warm_water_kg: float = 0.0

    @property
    def total_kg(self) -> float:
        return self.commute_kg + self.flight_kg + self.warm_water_kg


def normalize_and_map(raw) -> ParsedSurveyInputs:
    """Map raw answers (``RawSurveyAnswers`` or a plain dict) to parsed inputs."""
    if not isinstance(raw, RawSurveyAnswers):
        raw = RawSurveyAnswers.from_mapping(raw or {})

    flight_label = mappings.parse_flight_distance(raw.flight_distance)
    return ParsedSurveyInputs(
        office_days=mappings.parse_office_days(raw.office_days),
        distance_km=mappings.parse_distance_km(raw.distance),
        main_transport=mappings.parse_transport(raw.transport_main, raw.car_type),
        alternative_transport=mappings.pick_by_includes(raw.alternative_transport, mappings.TRANSPORT_MAP),
        alternative_frequency=mappings.parse_alt_freq(raw.alternative_transport_freq),
        car_type=mappings.pick_by_includes(raw.car_type, mappings.CAR_TYPE_MAP),
        flights_per_year=mappings.parse_flights_per_year(raw.flights_per_year),
        flight_distance_label=flight_label,
        flight_distance_km=mappings.flight_distance_km(flight_label),
        heating_type=mappings.parse_heating(raw.heating_type),
        warm_water_type=mappings.parse_warm_water(raw.warm_water_type),
        uses_green_electricity=to_text(raw.uses_green_electricity),
        smart_electricity_usage=mappings.parse_alt_freq(raw.smart_electricity_usage),
        fireworks_per_year=to_number(raw.fireworks_per_year),
        co2_importance=to_number(raw.co2_importance),
    )


def commute_kg(inputs: ParsedSurveyInputs, factors: Iterable) -> float:
    if not (inputs.office_days > 0 and inputs.distance_km > 0 and inputs.main_transport):
        return 0.0
    main_value = factor_value(find_factor(factors, inputs.main_transport))
    alt_value = factor_value(find_factor(factors, inputs.alternative_transport))
    alt_share = inputs.alternative_frequency or 0.0
    main_share = 1 - alt_share
    grams = inputs.office_days * inputs.distance_km * (main_value * main_share + alt_value * alt_share)
    return grams / 1000


def flight_kg(inputs: ParsedSurveyInputs, factors: Iterable) -> float:
    if not (inputs.flights_per_year and inputs.flight_distance_label):
        return 0.0
    value = factor_value(find_factor(factors, inputs.flight_distance_label))
    return value * inputs.flights_per_year / 1000


def warm_water_kg(inputs: ParsedSurveyInputs, factors: Iterable) -> float:
    if not inputs.warm_water_type:
        return 0.0
    energy = find_factor(factors, ENERGY_DEMAND_WARM_WATER)
    source = find_factor(factors, inputs.warm_water_type)
    if energy is None or source is None:
        logger.debug("warm water factors missing for %r", inputs.warm_water_type)
        return 0.0
    return factor_value(energy) * factor_value(source) / 1000


def compute_breakdown(inputs: ParsedSurveyInputs, factors: Iterable) -> Co2Breakdown:
    factors = list(factors)
    return Co2Breakdown(
        commute_kg=commute_kg(inputs, factors),
        flight_kg=flight_kg(inputs, factors),
        warm_water_kg=warm_water_kg(inputs, factors),
    )


def compute_total(inputs: ParsedSurveyInputs, factors: Iterable) -> float:
    """Kilograms CO2 per year; unrounded."""
    return compute_breakdown(inputs, factors).total_kg
