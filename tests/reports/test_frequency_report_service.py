from __future__ import annotations

from datetime import date

import pytest

from conftest import attendance_data, class_data, student_data
from student_records.attendance.model import SemesterPeriod, YearPeriod, parse_report_period
from student_records.core.enums import Period
from student_records.core.exceptions import ValidationError
from student_records.reports.service import FrequencyReportService


@pytest.fixture
def scenario(store):
    c = store.add_class(class_data(name="Class C"))
    a = store.add_student(student_data(c.id, first_name="Ann", last_name="Lee"))
    b = store.add_student(student_data(c.id, first_name="Bob", last_name="Ray"))
    store.add_attendance_record(attendance_data(a.id, c.id, hours_present=4, hours_absent=4, total_hours=8))
    store.add_attendance_record(
        attendance_data(a.id, c.id, date=date(2024, 9, 11), hours_present=8, hours_absent=0, total_hours=8)
    )
    return c, a, b


def test_semester_report_sums_and_averages(store, scenario, fixed_now):
    c, a, b = scenario
    svc = FrequencyReportService(store, clock=lambda: fixed_now)

    report = svc.generate_frequency_report(c.id, SemesterPeriod("Fall"))

    assert report.class_name == "Class C"
    assert report.period == Period.SEMESTER
    assert report.semester == "Fall"
    assert report.academic_year == "2024-2025"
    assert report.generated_at == fixed_now

    row_a, row_b = report.student_reports
    assert row_a.student_id == a.id
    assert row_a.student_name == "Ann Lee"
    assert (row_a.total_hours_present, row_a.total_hours_absent, row_a.total_hours) == (12, 4, 16)
    assert row_a.presence_percentage == pytest.approx(75.0)
    assert row_a.absence_percentage == pytest.approx(25.0)

    assert row_b.student_id == b.id
    assert (row_b.total_hours_present, row_b.total_hours_absent, row_b.total_hours) == (0, 0, 0)
    assert row_b.presence_percentage == 0
    assert row_b.absence_percentage == 0

    assert report.class_average_presence == pytest.approx(37.5)
    assert report.class_average_absence == pytest.approx(12.5)


def test_unknown_class_returns_none(store, scenario):
    svc = FrequencyReportService(store)
    assert svc.generate_frequency_report("nope", SemesterPeriod("Fall")) is None
    assert svc.generate_frequency_report("nope", YearPeriod()) is None


def test_report_is_deterministic_apart_from_timestamp(store, scenario):
    c, _, _ = scenario
    svc = FrequencyReportService(store)

    first = svc.generate_frequency_report(c.id, SemesterPeriod("Fall"))
    second = svc.generate_frequency_report(c.id, SemesterPeriod("Fall"))

    assert first.student_reports == second.student_reports
    assert first.class_average_presence == second.class_average_presence
    assert first.class_average_absence == second.class_average_absence


def test_report_does_not_touch_the_store(store, storage, scenario):
    c, _, _ = scenario
    saved = dict(storage._data)
    snapshot = (store.get_classes(), store.get_students(), store.get_attendance_records())

    FrequencyReportService(store).generate_frequency_report(c.id, YearPeriod())

    assert storage._data == saved
    assert (store.get_classes(), store.get_students(), store.get_attendance_records()) == snapshot


def test_semester_filter_excludes_other_semesters_and_year_records(store, scenario):
    c, a, _ = scenario
    store.add_attendance_record(attendance_data(a.id, c.id, semester="Spring", hours_present=0, hours_absent=8))
    store.add_attendance_record(
        attendance_data(a.id, c.id, period="year", semester=None, hours_present=0, hours_absent=8)
    )

    report = FrequencyReportService(store).generate_frequency_report(c.id, SemesterPeriod("Fall"))

    assert report.student_reports[0].total_hours == 16


def test_year_report_ignores_semester_labels(store, scenario):
    c, a, _ = scenario
    store.add_attendance_record(
        attendance_data(a.id, c.id, period="year", semester="Fall", hours_present=6, hours_absent=2, total_hours=8)
    )
    store.add_attendance_record(
        attendance_data(a.id, c.id, period="year", semester=None, hours_present=2, hours_absent=6, total_hours=8)
    )

    report = FrequencyReportService(store).generate_frequency_report(c.id, YearPeriod())

    row = report.student_reports[0]
    assert report.period == Period.YEAR
    assert report.semester is None
    assert (row.total_hours_present, row.total_hours_absent, row.total_hours) == (8, 8, 16)
    assert row.presence_percentage == pytest.approx(50.0)


def test_total_class_hours_is_first_matching_record(store):
    c = store.add_class(class_data())
    s = store.add_student(student_data(c.id))
    store.add_attendance_record(attendance_data(s.id, c.id, period="year", total_hours=5, hours_present=5))
    store.add_attendance_record(attendance_data(s.id, c.id, total_hours=6, hours_present=6))
    store.add_attendance_record(attendance_data(s.id, c.id, total_hours=4, hours_present=4))

    svc = FrequencyReportService(store)

    assert svc.generate_frequency_report(c.id, SemesterPeriod("Fall")).total_class_hours == 6
    assert svc.generate_frequency_report(c.id, SemesterPeriod("Winter")).total_class_hours == 0


def test_inconsistent_hours_are_not_corrected(store):
    c = store.add_class(class_data())
    s = store.add_student(student_data(c.id))
    store.add_attendance_record(attendance_data(s.id, c.id, hours_present=6, hours_absent=6, total_hours=8))

    row = FrequencyReportService(store).generate_frequency_report(c.id, SemesterPeriod("Fall")).student_reports[0]

    assert row.presence_percentage == pytest.approx(75.0)
    assert row.absence_percentage == pytest.approx(75.0)


def test_class_without_students_has_zero_averages(store):
    c = store.add_class(class_data())

    report = FrequencyReportService(store).generate_frequency_report(c.id, YearPeriod())

    assert report.student_reports == ()
    assert report.class_average_presence == 0
    assert report.class_average_absence == 0


def test_averages_weight_students_equally(store):
    c = store.add_class(class_data())
    heavy = store.add_student(student_data(c.id, first_name="Heavy"))
    light = store.add_student(student_data(c.id, first_name="Light"))
    store.add_attendance_record(attendance_data(heavy.id, c.id, hours_present=90, hours_absent=10, total_hours=100))
    store.add_attendance_record(attendance_data(light.id, c.id, hours_present=0, hours_absent=1, total_hours=1))

    report = FrequencyReportService(store).generate_frequency_report(c.id, SemesterPeriod("Fall"))

    assert report.class_average_presence == pytest.approx(45.0)
    assert report.class_average_absence == pytest.approx(55.0)


def test_generate_for_request_parses_period(store, scenario):
    c, _, _ = scenario
    svc = FrequencyReportService(store)

    assert svc.generate_for_request(c.id, "semester", "Fall").student_reports[0].total_hours == 16

    with pytest.raises(ValidationError):
        svc.generate_for_request(c.id, "semester", "")


def test_parse_report_period():
    assert parse_report_period("semester", " Fall ") == SemesterPeriod("Fall")
    assert parse_report_period("year", "Fall") == YearPeriod()
    assert parse_report_period(Period.YEAR) == YearPeriod()

    with pytest.raises(ValidationError):
        parse_report_period("month")
    with pytest.raises(ValidationError):
        parse_report_period(None)
