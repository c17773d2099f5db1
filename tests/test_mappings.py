import pytest

from co2survey import mappings
from co2survey.mappings import (
    match_first,
    parse_alt_freq,
    parse_distance_km,
    parse_flights_per_year,
    parse_heating,
    parse_office_days,
    parse_transport,
    parse_warm_water,
    pick_by_includes,
)


@pytest.mark.parametrize("text,km", [
    ("<10 km", 5),
    ("10-20 km", 15),
    ("20–30 km", 25),
    ("30 - 40 km", 35),
    ("40-50 km", 45),
    ("50-60 km", 55),
    (">60 km", 80),
])
def test_distance_buckets(text, km):
    assert parse_distance_km(text) == km


def test_distance_unmatched_is_zero():
    assert parse_distance_km("weiß nicht") == 0
    assert parse_distance_km(None) == 0


def test_numeric_distance_is_km():
    assert parse_distance_km(12) == 12
    assert parse_distance_km(-3.0) == 0
    assert parse_distance_km(float("nan")) == 0


def test_office_days():
    assert parse_office_days("3 Tage") == 3
    assert parse_office_days("keine Angabe") == 0
    assert parse_office_days(None) == 0
    assert parse_office_days("10 Tage") == 0
    assert parse_office_days(4.0) == 4


def test_alt_freq():
    assert parse_alt_freq("Ja, oft") == pytest.approx(1 / 3)
    assert parse_alt_freq("selten") == 0.1
    assert parse_alt_freq("Manchmal") == pytest.approx(1 / 30)
    assert parse_alt_freq("Nie") == 0
    assert parse_alt_freq("keine Ahnung") is None
    assert parse_alt_freq(None) is None


def test_flight_buckets_are_rounded():
    assert parse_flights_per_year("0") == 0
    assert parse_flights_per_year("1-2") == 2
    assert parse_flights_per_year("2-5 mal") == 3
    assert parse_flights_per_year("5-10") == 7


def test_flight_count_numeric_fallback():
    assert parse_flights_per_year("3") == 3
    assert parse_flights_per_year("2,5") == 3
    assert parse_flights_per_year(2.0) == 2
    assert parse_flights_per_year("10") == 10
    assert parse_flights_per_year("20") == 20
    assert parse_flights_per_year(">10") == 10
    assert parse_flights_per_year("mehr als 10") == 10
    assert parse_flights_per_year("0 Flüge") == 0
    assert parse_flights_per_year("gar nicht") is None
    assert parse_flights_per_year(None) is None


def test_first_declared_key_wins_on_overlap():
    gas_first = (("gas", "from gas"), ("erdgas", "from erdgas"))
    erdgas_first = (("erdgas", "from erdgas"), ("gas", "from gas"))
    assert pick_by_includes("Erdgas", gas_first) == "from gas"
    assert pick_by_includes("Erdgas", erdgas_first) == "from erdgas"


def test_match_first_default():
    assert match_first("nichts", (("a b", 1),)) is None
    assert match_first("nichts", (("a b", 1),), "UNKNOWN") == "UNKNOWN"


@pytest.mark.parametrize("text,label", [
    ("Auto Benzin", mappings.PKW_BENZIN),
    ("Firmenwagen", mappings.PKW_BENZIN),
    ("PKW Diesel", mappings.PKW_DIESEL),
    ("Plugin Hybrid", mappings.PLUGIN_HYBRID_PHEV),
    ("Hybrid", mappings.HYBRID_HEV),
    ("E-Auto", mappings.ELEKTROAUTO_BEV),
    ("Bus", mappings.OEPNV_BUS),
    ("Öffis", mappings.OEPNV_BAHN),
    ("Zug", mappings.OEPNV_BAHN),
    ("Fahrrad", mappings.FAHRRAD),
    ("E-Bike", mappings.E_BIKE),
    ("Zu Fuß", mappings.ZU_FUSS),
])
def test_transport_labels(text, label):
    assert parse_transport(text) == label


def test_car_type_is_only_a_fallback():
    assert parse_transport("Sonstiges", "Diesel") == mappings.PKW_DIESEL
    assert parse_transport("Bahn", "Diesel") == mappings.OEPNV_BAHN
    assert parse_transport("Sonstiges", None) is None


@pytest.mark.parametrize("text,label", [
    ("Erdgas", mappings.ERDGAS),
    ("Heizöl", mappings.HEIZOEL),
    ("Öl", mappings.HEIZOEL),
    ("Pellets", mappings.PELLETS),
    ("Holz", mappings.STUECKHOLZ),
    ("Fernwärme", mappings.FERNWAERME),
    ("Wärmepumpe", mappings.WAERMEPUMPE),
    ("Solarthermie", mappings.SOLARTHERMIE),
    ("Ökostrom", mappings.OEKOSTROM),
    ("Strom", mappings.STROM_MIX),
])
def test_heating_labels(text, label):
    assert parse_heating(text) == label


def test_heating_unmatched():
    assert parse_heating("Kachelofen mit Kohle") is None


def test_warm_water_labels():
    assert parse_warm_water("Erdgas") == mappings.ERDGAS
    assert parse_warm_water("Solar") == mappings.SOLARTHERMIE
    assert parse_warm_water("Durchlauferhitzer (Strom)") == mappings.STROM_MIX
    assert parse_warm_water("weiß nicht") is None


def test_flight_distance_km_proxy():
    label = mappings.parse_flight_distance("eher Mittelstrecke")
    assert label == mappings.FLIGHT_MEDIUM
    assert mappings.flight_distance_km(label) == 2500
    assert mappings.flight_distance_km(mappings.FLIGHT_SHORT) == 750
    assert mappings.flight_distance_km(mappings.FLIGHT_LONG) == 5000
    assert mappings.flight_distance_km(None) is None
