# co2survey/importer.py
"""Spreadsheet import of the emission factor table and the survey export.

    python -m co2survey.importer [--emissions PATH] [--survey PATH]
"""
import argparse
import logging
from pathlib import Path

import pandas as pd

from . import crud, models
from .calculation import RawSurveyAnswers
from .config import EMISSION_FILE, SURVEY_FILE, setup_logging
from .database import Base, SessionLocal, engine
from .factors import FLIGHT, HEATING, TRANSPORT, Factor
from .normalizer import normalize_text, to_number, to_text

logger = logging.getLogger(__name__)

MOBILITY_LABEL = ["Mobilitätsart (2)", "MobilitÃ¤tsart (2)"]

# sheet name -> category and the header aliases of its columns
FACTOR_SHEETS = [
    {
        "sheet": "Pendelweg",
        "category": TRANSPORT,
        "label": MOBILITY_LABEL,
        "value": ["Lebenszyklus Emission"],
    },
    {
        "sheet": "Urlaub",
        "category": FLIGHT,
        "label": MOBILITY_LABEL,
        "value": ["Lebenszyklus Emission"],
    },
    {
        "sheet": "Wärmeerzeugung",
        "category": HEATING,
        "label": ["Emissionsquelle / Parameter"],
        "value": ["CO2-Emissionen"],
    },
]
UNIT_ALIASES = ["Einheit"]

# RawSurveyAnswers field -> question text(s) in the survey export
SURVEY_QUESTIONS = {
    "office_days": ["Wie oft sind Sie pro Woche im Büro?"],
    "transport_main": ["Mit welchem Verkehrsmittel kommen Sie in der Regel zur Arbeit?"],
    "alternative_transport_freq": ["Nutzen Sie auch alternative Verkehrsmittel an manchen Tagen?"],
    "alternative_transport": ["Wenn ja, welche alternativen Verkehrsmittel?"],
    "distance": ["Wie weit ist Ihr Arbeitsplatz von zuhause entfernt?"],
    "car_type": ["Falls Sie ein Auto benutzen: Welchen Antrieb hat Ihr Auto?"],
    "flights_per_year": ["Wie oft fliegen Sie im Jahr?"],
    "flight_distance": ["Wenn Sie fliegen, welche Strecken fliegen Sie eher?"],
    "heating_type": ["Wie heizen Sie zu Hause?"],
    "warm_water_type": ["Wie wird Ihr Warmwasser zu Hause erzeugt?"],
    "uses_green_electricity": ["Nutzen Sie zu Hause Ökostrom"],
    "smart_electricity_usage": [
        "Nutzen Sie Strom bewusst zu Zeiten, in denen viel erneuerbare Energie verfügbar ist "
        "(z. B. mittags bei PV-Strom)?"
    ],
    "fireworks_per_year": ["Wie oft verwenden Sie Feuerwerk?"],
    "co2_importance": ["Wie wichtig ist Ihnen das Thema CO2-Einsparung? (1 sehr wichtig – 6 gar nicht wichtig)"],
}


def frame_to_rows(df):
    """DataFrame -> list of dicts with NaN replaced by None."""
    df = df.astype(object)
    return df.where(pd.notna(df), None).to_dict("records")


def read_workbook(path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"workbook not found: {path}")
    sheets = pd.read_excel(path, sheet_name=None, engine="openpyxl")
    return {name: frame_to_rows(df) for name, df in sheets.items()}


def find_column(headers, aliases):
    """First header whose normalized text equals one of the normalized aliases."""
    normalized = [(h, normalize_text(h)) for h in headers]
    for alias in aliases:
        wanted = normalize_text(alias)
        for raw, norm in normalized:
            if norm == wanted:
                return raw
    return None


def extract_factors(sheets):
    items = []
    for cfg in FACTOR_SHEETS:
        rows = sheets.get(cfg["sheet"]) or []
        if not rows:
            logger.warning("factor sheet %r missing or empty", cfg["sheet"])
            continue
        headers = list(rows[0].keys())
        label_key = find_column(headers, cfg["label"])
        value_key = find_column(headers, cfg["value"])
        unit_key = find_column(headers, UNIT_ALIASES)
        if label_key is None or value_key is None:
            logger.warning("factor sheet %r lacks label/value columns", cfg["sheet"])
            continue
        for row in rows:
            label = to_text(row.get(label_key))
            value_text = to_text(row.get(value_key))
            if not label or not value_text:
                continue
            items.append(Factor(
                category=cfg["category"],
                label=label,
                value=to_number(row.get(value_key)),
                unit=(to_text(row.get(unit_key)) if unit_key else None) or "",
            ))
    return items


def import_emission_factors(db, path=EMISSION_FILE):
    factors = extract_factors(read_workbook(path))
    if not factors:
        logger.warning("no emission factors found in %s, keeping current table", path)
        return []
    crud.replace_emission_factors(db, factors)
    logger.info("emission factors imported: %d", len(factors))
    return factors


def extract_answers(rows):
    if not rows:
        return []
    headers = list(rows[0].keys())
    columns = {field: find_column(headers, aliases) for field, aliases in SURVEY_QUESTIONS.items()}
    missing = sorted(field for field, col in columns.items() if col is None)
    if missing:
        logger.warning("survey export lacks questions for: %s", ", ".join(missing))
    answers = []
    for row in rows:
        values = {}
        for field, col in columns.items():
            if col is None:
                continue
            value = row.get(col)
            values[field] = to_text(value) if isinstance(value, str) else value
        answers.append(RawSurveyAnswers(**values))
    return answers


def import_survey(db, factors, user_id, path=SURVEY_FILE):
    """Replace the surveys owned by ``user_id`` with the rows of the export."""
    sheets = read_workbook(path)
    rows = next(iter(sheets.values()), []) if sheets else []
    answers = extract_answers(rows)
    if not answers:
        logger.warning("no survey answers found in %s", path)
        return 0
    db.query(models.Survey).filter(models.Survey.user_id == user_id).delete()
    for raw in answers:
        survey, _ = crud.build_survey(user_id, raw, factors)
        db.add(survey)
    db.commit()
    logger.info("survey answers imported: %d", len(answers))
    return len(answers)


def run_import(db, emissions_path=EMISSION_FILE, survey_path=SURVEY_FILE):
    """Factors first, then survey rows; every other survey is recomputed afterwards."""
    for path in (emissions_path, survey_path):
        if not Path(path).exists():
            raise FileNotFoundError(f"workbook not found: {path}")
    import_emission_factors(db, emissions_path)
    factors = crud.list_factors(db)
    user = crud.ensure_import_user(db)
    surveys = import_survey(db, factors, user.id, survey_path)
    crud.recompute_totals(db)
    return len(factors), surveys


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import emission factors and survey answers.")
    parser.add_argument("--emissions", type=Path, default=EMISSION_FILE)
    parser.add_argument("--survey", type=Path, default=SURVEY_FILE)
    args = parser.parse_args(argv)

    setup_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        factors, surveys = run_import(db, args.emissions, args.survey)
    except FileNotFoundError as exc:
        logger.error("import failed: %s", exc)
        return 1
    finally:
        db.close()
    logger.info("import done: %d factors, %d surveys", factors, surveys)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
