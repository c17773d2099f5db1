# co2survey/factors.py
# Emission factor lookup. Factors come from the imported factor table; any
# object with ``label`` and ``value`` attributes (ORM rows included) works.
from dataclasses import dataclass
from typing import Iterable, Optional

TRANSPORT = "transport"
FLIGHT = "flight"
HEATING = "heating"

# Annual energy demand for warm water, stored as a heating row.
ENERGY_DEMAND_WARM_WATER = "Energiebedarf Warmwasser"


@dataclass(frozen=True)
class Factor:
    category: str
    label: str
    value: Optional[float]
    unit: str = ""


def find_factor(factors: Iterable, label: Optional[str]):
    """Exact, case-sensitive match on the canonical label; None when absent."""
    if not label:
        return None
    for factor in factors:
        if factor.label == label:
            return factor
    return None


def factor_value(factor) -> float:
    # a missing factor (or a row whose value could not be parsed) contributes nothing
    if factor is None or factor.value is None:
        return 0.0
    return float(factor.value)
