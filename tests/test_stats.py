from datetime import datetime
from types import SimpleNamespace

from co2survey import partials, stats


def survey(total, transport="PKW Benzin", flights=None, created=datetime(2025, 3, 4), **kw):
    return SimpleNamespace(
        id="survey_abcd1234", created_at=created, total_co2_kg=total, transport_main=transport,
        flights_per_year=flights, office_days_per_week=kw.get("office_days", 3),
        distance_km=kw.get("distance", 15),
    )


def test_flight_buckets():
    assert [stats.flight_bucket(v) for v in (None, 0, 1, 2, 3, 5, 7)] == [
        "0", "0", "1-2", "1-2", "2-5", "2-5", ">5"
    ]


def test_public_aggregations_by_month():
    rows = [
        survey(10.0, created=datetime(2025, 1, 15)),
        survey(20.0, transport=None, flights=7, created=datetime(2025, 1, 20)),
        survey(None, flights=2, created=datetime(2024, 12, 1)),
    ]
    agg = stats.public_aggregations(rows)
    assert agg["count"] == 3
    assert agg["avg_co2_kg"] == 10.0
    assert agg["by_transport"] == {"PKW Benzin": 2, "UNKNOWN": 1}
    assert agg["flights"] == {"0": 1, ">5": 1, "1-2": 1}
    assert agg["months"] == ["2024-12", "2025-01"]
    assert agg["avg_co2_by_month"] == [0.0, 15.0]


def test_empty_aggregations():
    assert stats.hr_aggregations([]) == {"count": 0, "avg_co2_kg": 0.0, "by_transport": {}}


def test_summary_cards():
    html = partials.summary_cards([survey(1.234), survey(2.0, created=datetime(2025, 6, 1))])
    assert "Einträge gesamt" in html
    assert "1.62" in html
    assert "01.06.2025" in html
    assert "—" in partials.summary_cards([])


def test_survey_rows_escape_labels():
    html = partials.survey_rows([survey(3.0, transport="<b>Bus</b>", office_days=0)])
    assert "&lt;b&gt;Bus&lt;/b&gt;" in html
    assert "abcd1234" in html
    assert "3.00" in html
    assert partials.survey_rows([]) == partials.EMPTY_ROW


def test_survey_rows_drop_trailing_zero_from_whole_km():
    html = partials.survey_rows([survey(1.0, distance=15.0), survey(1.0, distance=12.5)])
    assert '<td class="px-3 py-2">15</td>' in html
    assert "15.0" not in html
    assert '<td class="px-3 py-2">12.5</td>' in html
