"""
Unit tests for report shaping and the monthly report renderer
"""
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from playpro_admin.core.lookups import (
    format_date_dmy,
    gender_label,
    get_name_by_id,
    indonesian_month,
    number_with_commas,
    storage_url,
)
from playpro_admin.core.report import (
    NO_ATTENDANCE,
    age_label,
    age_years_months,
    attendance_row,
    build_report_view,
    monthly_report_row,
    render_report_html,
    report_filename,
)

STORAGE = "http://localhost:8000/storage"


@pytest.fixture
def payload():
    return {
        "play_kid": {"id": 1, "name": "Andi <Putra>", "birth_date": "2018-10-20", "photo": "storage/kids/andi.jpg"},
        "branch": {"id": 3, "name": "Kemang"},
        "classes": [
            {"id": 10, "sport": {"name": "Football"}, "category": {"name": "U-8"}},
            {"id": 11, "sport": {"name": "Basket"}, "category": None},
        ],
        "attendance_reports": [
            {"id": 100, "class_id": 11, "date": "2025-08-02", "motorik": "Good",
             "coach": {"name": "Coach Budi", "photo": "storage/coach/budi.png"}},
            {"id": 101, "class_id": 10, "date": "2025-08-05", "locomotor": "Great", "coach": {"name": "Coach Sari"}},
            {"id": 102, "class_id": 11, "date": "05/08/2025", "coach": None},
        ],
        "attendance_count": 3,
        "months_display": "Agustus 2025",
    }


class TestLookups:

    def test_get_name_by_id(self):
        items = [{"id": 1, "name": "Kemang"}]
        assert get_name_by_id("1", items) == "Kemang"
        assert get_name_by_id(2, items) == 2

    def test_number_with_commas(self):
        assert number_with_commas(1234567) == "1,234,567"
        assert number_with_commas(0) == "0"

    def test_storage_url_strips_prefix(self):
        assert storage_url("storage/kids/a.jpg", STORAGE + "/") == f"{STORAGE}/kids/a.jpg"
        assert storage_url(None, STORAGE) is None
        assert storage_url("https://cdn/x.jpg", STORAGE) == "https://cdn/x.jpg"

    def test_gender_label(self):
        assert gender_label("M") == "Male"
        assert gender_label("F") == "Female"
        assert gender_label(None) == "-"

    def test_format_date_dmy(self):
        assert format_date_dmy("2025-08-01") == "01-08-2025"
        assert format_date_dmy("2025-08-01T10:00:00Z") == "01-08-2025"
        assert format_date_dmy("05/08/2025") == "05/08/2025"
        assert format_date_dmy(None) == "-"

    def test_indonesian_month(self):
        assert indonesian_month("2025-08-14") == "Agustus 2025"
        assert indonesian_month(None) == "-"
        assert indonesian_month("soon") == "soon"


class TestAges:

    def test_years_and_months(self):
        assert age_years_months("2018-10-20", date(2025, 8, 1)) == "6 tahun 10 bulan"
        assert age_years_months("2018-03-20", date(2025, 8, 1)) == "7 tahun 5 bulan"
        assert age_years_months(None) == "-"

    def test_age_label(self):
        assert age_label("2018-08-02", date(2025, 8, 1)) == "6 yrs"
        assert age_label("2018-08-01", date(2025, 8, 1)) == "7 yrs"
        assert age_label("") == "-"


class TestRows:

    def test_attendance_row(self):
        row = attendance_row({
            "id": 5,
            "play_kid": {"id": 1, "name": None, "nick_name": "Ndi"},
            "schedule": {"class_model": {"name": "Football U-8"}, "start_time": "08:00:00",
                         "end_time": "09:00:00", "date": "2025-08-01"},
            "attendance": 1,
            "motorik": None,
            "locomotor": "ok",
            "overall": None,
        })
        assert row["play_kid"] == "Ndi"
        assert row["class"] == "Football U-8"
        assert (row["start_time"], row["end_time"]) == ("08:00", "09:00")
        assert row["attendance"] == "Present"
        assert row["status"] == "Submitted"
        assert row["overall"] == "-"

    def test_attendance_row_not_submitted(self):
        row = attendance_row({"id": 6, "attendance": 0})
        assert row["attendance"] == "Absent"
        assert row["status"] == "Not Submitted"
        assert row["play_kid"] == "-"
        assert row["class"] == "-"

    def test_monthly_report_row(self):
        row = monthly_report_row({
            "play_kid": {"id": 9},
            "class": {"id": 10, "name": "Football", "branch": {"name": "Kemang"}},
            "attendance_reports": [{"date": "2025-08-14"}, {"date": "2025-09-01"}],
        })
        assert row["play_kid"] == "#9"
        assert row["class_branch"] == "Football — Kemang"
        assert row["month"] == "Agustus 2025"
        assert row["attendance_count"] == 2


class TestReportView:

    def test_groups_ordered_by_class_id(self, payload):
        view = build_report_view(payload, STORAGE, today=date(2025, 8, 1))
        assert [g.class_id for g in view.groups] == [10, 11]
        assert [e.report_id for e in view.groups[1].entries] == [100, 102]

    def test_non_numeric_class_ids_follow_in_first_seen_order(self):
        payload = {"attendance_reports": [
            {"id": 1, "class_id": "b"}, {"id": 2, "class_id": 7}, {"id": 3, "class_id": "a"}, {"id": 4, "class_id": 2},
        ]}
        view = build_report_view(payload)
        assert [g.class_id for g in view.groups] == [2, 7, "b", "a"]

    def test_entry_fields(self, payload):
        view = build_report_view(payload, STORAGE, today=date(2025, 8, 1))
        first, second = view.groups[1].entries
        assert first.coach_name == "Coach Budi"
        assert first.coach_photo == f"{STORAGE}/coach/budi.png"
        assert first.subtitle == "Basket"
        assert first.date == "02-08-2025"
        assert (first.motorik, first.locomotor, first.body_control) == ("Good", "-", "-")
        assert second.coach_name == "-"
        assert second.date == "05/08/2025"
        assert view.groups[0].entries[0].subtitle == "Football — U-8"

    def test_profile(self, payload):
        view = build_report_view(payload, STORAGE, today=date(2025, 8, 1))
        assert view.period == "Agustus 2025"
        assert view.age == "6 tahun 10 bulan"
        assert view.branch == "Kemang"
        assert view.kid_photo == f"{STORAGE}/kids/andi.jpg"
        assert view.attendance_count == 3

    def test_html(self, payload):
        document = render_report_html(build_report_view(payload, STORAGE, today=date(2025, 8, 1)))
        assert "Rapor Bulanan" in document
        assert "Periode : Agustus 2025" in document
        assert "Andi &lt;Putra&gt;" in document
        assert "Andi <Putra>" not in document
        assert document.count('class="card"') == 3
        assert NO_ATTENDANCE not in document

    def test_empty_report(self):
        view = build_report_view({"play_kid": {"name": "Eka"}, "attendance_reports": []})
        assert view.is_empty
        assert NO_ATTENDANCE in render_report_html(view)

    def test_filename(self):
        assert report_filename(date(2025, 8, 1)) == "report-2025-08-01.html"


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
