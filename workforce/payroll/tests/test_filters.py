import pytest
from datetime import date

from payroll.exceptions import InvalidDate
from payroll.selectors.filters import RecordFilter, build_record_filter, build_salary_filter, month_range


def test_record_filter_precedence():
    f = build_record_filter({"date": "2024-01-05", "start_date": "2024-01-01", "month": "2024-02"})
    assert f.date_bounds() == (date(2024, 1, 5), date(2024, 1, 5))

    f = build_record_filter({"start_date": "2024-01-01", "month": "2024-02"})
    assert f.date_bounds() == (date(2024, 1, 1), None)

    f = build_record_filter({"month": "2024-02", "worker_id": "7"})
    assert f.worker_id == 7
    assert f.date_bounds() == (date(2024, 2, 1), date(2024, 2, 29))

    assert RecordFilter().date_bounds() == (None, None)

def test_record_filter_blank_and_list_values():
    f = build_record_filter({"date": "", "worker_id": ["3"], "month": None})
    assert f == RecordFilter(worker_id=3)

@pytest.mark.parametrize("params", [
    {"date": "05/01/2024"}, {"month": "2024-13"}, {"end_date": "soon"}, {"start_date": "2024-01-01xyz"},
])
def test_record_filter_rejects_bad_dates(params):
    with pytest.raises(InvalidDate):
        build_record_filter(params)

def test_month_range_december():
    assert month_range("2023-12") == (date(2023, 12, 1), date(2023, 12, 31))

def test_salary_filter_status():
    assert build_salary_filter({"status": "partial"}).status == "PARTIAL"
    assert build_salary_filter({"status": "closed"}).status is None
    assert build_salary_filter(None).start_date is None
