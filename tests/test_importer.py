import pandas as pd
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from co2survey import crud, importer
from co2survey.config import IMPORT_USER_EMAIL
from co2survey.factors import ENERGY_DEMAND_WARM_WATER, FLIGHT, HEATING, TRANSPORT


@pytest.fixture
def emission_file(tmp_path):
    path = tmp_path / "emissionen_nach_typ.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({
            "Mobilitätsart (2)": ["PKW Benzin", "ÖPNV Bahn/Tram", "Fahrrad", None],
            "Lebenszyklus Emission": ["120", "30,5", 0, "5"],
            "Einheit": ["g/km", "g/km", "g/km", "g/km"],
        }).to_excel(writer, sheet_name="Pendelweg", index=False)
        pd.DataFrame({
            "Mobilitatsart (2)": ["Flugreisen Kurzstrecke (<1500 km)"],
            "Lebenszyklus Emission": [1000],
            "Einheit": ["g/Flug"],
        }).to_excel(writer, sheet_name="Urlaub", index=False)
        pd.DataFrame({
            "Emissionsquelle / Parameter": [ENERGY_DEMAND_WARM_WATER, "Erdgas (Brennwert)", "Solarthermie"],
            "CO2-Emissionen": [3000, 0.2, "k.A."],
            "Einheit": ["kWh/a", "kg/kWh", "kg/kWh"],
        }).to_excel(writer, sheet_name="Wärmeerzeugung", index=False)
    return path


@pytest.fixture
def survey_file(tmp_path):
    path = tmp_path / "auswertung_umfrage.xlsx"
    pd.DataFrame({
        "Wie oft sind Sie pro Woche im Büro?": ["5 Tage", "2", "keine Angabe"],
        "Mit welchem Verkehrsmittel kommen Sie in der Regel zur Arbeit?": ["Auto", "Öffis", "Sonstiges"],
        "Falls Sie ein Auto benutzen: Welchen Antrieb hat Ihr Auto?": ["Benzin", None, None],
        "Wie weit ist Ihr Arbeitsplatz von zuhause entfernt?": ["10-20 km", ">60 km", None],
        "Wie oft fliegen Sie im Jahr?": ["1-2", "0", None],
        "Wenn Sie fliegen, welche Strecken fliegen Sie eher?": ["Kurzstrecke", None, None],
        "Wie wird Ihr Warmwasser zu Hause erzeugt?": ["Erdgas", "Solar", None],
        "Wie wichtig ist Ihnen das Thema CO2-Einsparung? (1 sehr wichtig - 6 gar nicht wichtig)": [1, 3, None],
    }).to_excel(path, index=False, engine="openpyxl")
    return path


def test_find_column_ignores_case_and_umlauts():
    headers = ["MOBILITATSART (2)", "Einheit"]
    assert importer.find_column(headers, ["Mobilitätsart (2)"]) == "MOBILITATSART (2)"
    assert importer.find_column(headers, ["Quelle"]) is None


def test_extract_factors(emission_file):
    items = importer.extract_factors(importer.read_workbook(emission_file))
    by_label = {f.label: f for f in items}
    assert len(items) == 7
    assert by_label["PKW Benzin"].category == TRANSPORT
    assert by_label["ÖPNV Bahn/Tram"].value == 30.5
    assert by_label["Flugreisen Kurzstrecke (<1500 km)"].category == FLIGHT
    assert by_label[ENERGY_DEMAND_WARM_WATER].category == HEATING
    assert by_label["Solarthermie"].value is None


def test_import_replaces_factor_table(db, emission_file, factors):
    crud.replace_emission_factors(db, factors[:1])
    importer.import_emission_factors(db, emission_file)
    labels = [f.label for f in crud.list_factors(db)]
    assert len(labels) == 7
    assert labels.count("PKW Benzin") == 1


def test_missing_workbook(db, tmp_path):
    with pytest.raises(FileNotFoundError):
        importer.import_emission_factors(db, tmp_path / "nope.xlsx")


def test_run_import(db, emission_file, survey_file, make_user):
    user, _ = make_user("anna@firma.at")
    crud.create_survey(db, user.id, importer.RawSurveyAnswers(office_days="1"))

    n_factors, n_surveys = importer.run_import(db, emission_file, survey_file)
    assert (n_factors, n_surveys) == (7, 3)

    owner = crud.get_user_by_email(db, IMPORT_USER_EMAIL)
    imported = crud.get_surveys(db, owner.id)
    assert len(imported) == 3
    first = next(s for s in imported if s.office_days_per_week == 5)
    assert first.transport_main == "PKW Benzin"
    assert first.flights_per_year == 2
    assert first.co2_importance == 1
    assert first.total_co2_kg == pytest.approx(9.0 + 2.0 + 0.6)

    blank = next(s for s in imported if s.office_days_per_week == 0)
    assert blank.transport_main == "UNKNOWN"
    assert blank.total_co2_kg == 0

    # user submissions survive a re-import
    importer.run_import(db, emission_file, survey_file)
    assert len(crud.get_surveys(db, user.id)) == 1
    assert len(crud.get_surveys(db, owner.id)) == 3


@pytest.fixture
def cli_sessions(monkeypatch):
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    monkeypatch.setattr(importer, "engine", engine)
    monkeypatch.setattr(importer, "SessionLocal", Session)
    yield Session
    engine.dispose()


def test_cli_imports_workbooks(cli_sessions, emission_file, survey_file):
    assert importer.main(["--emissions", str(emission_file), "--survey", str(survey_file)]) == 0
    db = cli_sessions()
    try:
        assert len(crud.list_factors(db)) == 7
        assert len(crud.get_surveys(db)) == 3
    finally:
        db.close()


def test_cli_missing_workbook(cli_sessions, survey_file, tmp_path):
    argv = ["--emissions", str(tmp_path / "nope.xlsx"), "--survey", str(survey_file)]
    assert importer.main(argv) == 1
