import pytest
from datetime import date, timedelta
from decimal import Decimal

from django.utils import timezone

from payroll.exceptions import Conflict, InactiveWorker, InvalidAmount, InvalidDate, NotFound, RecordLocked
from payroll.models import Advance, AttendanceRecord, Expense, SalaryCycle, SHORTFALL_REASON_PREFIX, WageHistory
from payroll.repositories import worker_repository
from payroll.selectors import advance_selector
from payroll.selectors.filters import RecordFilter
from payroll.services import advance_service, attendance_service, expense_service, worker_service
from payroll.services.guards import lock_guard


# ============================
# Lock guard (database)
# ============================
@pytest.mark.django_db
def test_lock_guard_predicates(worker, paid_cycle):
    guard = lock_guard()
    assert guard.is_locked(worker.id, date(2024, 1, 1)) is True
    assert guard.is_locked(worker.id, date(2024, 1, 10)) is True
    assert guard.is_locked(worker.id, date(2024, 1, 11)) is False
    assert guard.is_locked_for_advance(worker.id, date(2024, 1, 9)) is True
    assert guard.is_locked_for_advance(worker.id, date(2024, 1, 10)) is False

@pytest.mark.django_db
def test_pending_cycle_locks_nothing(worker):
    SalaryCycle.objects.create(worker=worker, cycle_start=date(2024, 1, 1), cycle_end=date(2024, 1, 10),
                               net_pay=Decimal("100"))
    assert lock_guard().is_locked(worker.id, date(2024, 1, 5)) is False

@pytest.mark.django_db
def test_lock_error_names_cycle(worker, partial_cycle):
    with pytest.raises(RecordLocked) as exc:
        lock_guard().assert_not_locked(worker.id, date(2024, 1, 3), "attendance")
    assert "2024-01-01 to 2024-01-10" in exc.value.message
    assert exc.value.context["salary_id"] == partial_cycle.id


# ============================
# Attendance
# ============================
@pytest.mark.django_db
def test_attendance_snapshots_rates(worker):
    rec = attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 2),
                                               status=AttendanceRecord.Status.PRESENT, ot_units=2)
    worker_service.update_worker(worker_id=worker.id, wage=Decimal("800"), ot_rate=Decimal("80"))

    rec.refresh_from_db()
    assert rec.wage_at_time == Decimal("500.00")
    assert rec.ot_rate_at_time == Decimal("50.00")

    rec = attendance_service.update_attendance(attendance_id=rec.id, ot_units=3, wage_at_time=Decimal("1"))
    rec.refresh_from_db()
    assert rec.ot_units == Decimal("3.00")
    assert rec.wage_at_time == Decimal("500.00")

@pytest.mark.django_db
def test_attendance_rejections(worker):
    tomorrow = timezone.localdate() + timedelta(days=1)
    with pytest.raises(InvalidDate):
        attendance_service.create_attendance(worker_id=worker.id, date=tomorrow, status="PRESENT")
    with pytest.raises(InvalidDate):
        attendance_service.create_attendance(worker_id=worker.id, date=date(2023, 12, 31), status="PRESENT")
    with pytest.raises(NotFound):
        attendance_service.create_attendance(worker_id=9999, date=date(2024, 1, 2), status="PRESENT")

    attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 2), status="PRESENT")
    with pytest.raises(Conflict):
        attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 2), status="HALF")

    worker_service.set_worker_active(worker_id=worker.id, is_active=False)
    with pytest.raises(InactiveWorker):
        attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 3), status="PRESENT")

@pytest.mark.django_db
def test_attendance_locked_by_partial_cycle(worker):
    rec = attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 10), status="PRESENT")
    SalaryCycle.objects.create(worker=worker, cycle_start=date(2024, 1, 1), cycle_end=date(2024, 1, 10),
                               net_pay=Decimal("500"), total_paid=Decimal("100"), status=SalaryCycle.Status.PARTIAL)

    with pytest.raises(RecordLocked):
        attendance_service.update_attendance(attendance_id=rec.id, status="HALF")
    with pytest.raises(RecordLocked):
        attendance_service.delete_attendance(attendance_id=rec.id)
    with pytest.raises(RecordLocked):
        attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 5), status="PRESENT")

    # outside the window
    other = attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 11), status="PRESENT")
    attendance_service.delete_attendance(attendance_id=other.id)
    assert not AttendanceRecord.objects.filter(id=other.id).exists()

@pytest.mark.django_db
def test_attendance_cannot_move_into_locked_window(worker, paid_cycle):
    rec = attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 12), status="PRESENT")
    with pytest.raises(RecordLocked):
        attendance_service.update_attendance(attendance_id=rec.id, date=date(2024, 1, 9))

@pytest.mark.django_db
def test_attendance_cannot_move_before_join(worker):
    rec = attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 2), status="PRESENT")
    with pytest.raises(InvalidDate):
        attendance_service.update_attendance(attendance_id=rec.id, date=date(2023, 12, 31))
    rec.refresh_from_db()
    assert rec.date == date(2024, 1, 2)

@pytest.mark.django_db
def test_record_writes_hold_worker_row_lock(worker, expense_type, monkeypatch):
    locked = []
    real = worker_repository.get_for_update

    def spy(worker_id):
        locked.append(worker_id)
        return real(worker_id)

    monkeypatch.setattr(worker_repository, "get_for_update", spy)

    rec = attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 2), status="PRESENT")
    attendance_service.update_attendance(attendance_id=rec.id, status="HALF")
    attendance_service.delete_attendance(attendance_id=rec.id)
    adv = advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 2), amount="10")
    advance_service.update_advance(advance_id=adv.id, amount="20")
    advance_service.delete_advance(advance_id=adv.id)
    exp = expense_service.create_expense(worker_id=worker.id, date=date(2024, 1, 2), amount="5",
                                         type_id=expense_type.id)
    expense_service.update_expense(expense_id=exp.id, amount="6")
    expense_service.delete_expense(expense_id=exp.id)

    assert locked == [worker.id] * 9

@pytest.mark.django_db
def test_list_attendance_filters(worker, other_worker):
    for d in (2, 3, 15):
        attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, d), status="PRESENT")
    attendance_service.create_attendance(worker_id=other_worker.id, date=date(2024, 1, 2), status="PRESENT")

    assert attendance_service.list_attendance(RecordFilter(worker_id=worker.id)).count() == 3
    assert attendance_service.list_attendance(RecordFilter(date=date(2024, 1, 2))).count() == 2
    f = RecordFilter(worker_id=worker.id, start_date=date(2024, 1, 3), end_date=date(2024, 1, 31))
    assert attendance_service.list_attendance(f).count() == 2


# ============================
# Advances
# ============================
@pytest.mark.django_db
def test_advance_on_last_day_of_paid_cycle(worker, paid_cycle):
    adv = advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 10), amount="250")
    assert adv.amount == Decimal("250.00")

    with pytest.raises(RecordLocked):
        advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 9), amount="250")

@pytest.mark.django_db
def test_advance_validation(worker):
    with pytest.raises(InvalidAmount):
        advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 2), amount="0")
    worker_service.set_worker_active(worker_id=worker.id, is_active=False)
    with pytest.raises(InactiveWorker):
        advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 2), amount="10")

@pytest.mark.django_db
def test_consumed_advance_is_locked(worker, db_engine):
    adv = advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 2), amount="100")
    cycle = db_engine.create_salary(worker.id, date(2024, 1, 5))

    adv.refresh_from_db()
    assert adv.salary_id == cycle.id
    # cycle is still PENDING; the link alone locks the advance
    with pytest.raises(RecordLocked):
        advance_service.update_advance(advance_id=adv.id, amount="50")
    with pytest.raises(RecordLocked):
        advance_service.delete_advance(advance_id=adv.id)

@pytest.mark.django_db
def test_free_advance_update_and_delete(worker):
    adv = advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 2), amount="100", reason="rent")
    adv = advance_service.update_advance(advance_id=adv.id, amount="120", reason="rent + bus")
    assert adv.amount == Decimal("120.00")
    assert adv.reason == "rent + bus"
    advance_service.delete_advance(advance_id=adv.id)
    assert not Advance.objects.filter(id=adv.id).exists()

@pytest.mark.django_db
def test_shortfall_advance_cannot_change(worker, db_engine):
    attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 1),
                                         status=AttendanceRecord.Status.PRESENT, ot_units=2)
    advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 1), amount="800")
    db_engine.create_salary(worker.id, date(2024, 1, 2))
    auto = Advance.objects.get(worker=worker, reason__startswith=SHORTFALL_REASON_PREFIX)
    assert auto.salary_id is None

    with pytest.raises(RecordLocked):
        advance_service.update_advance(advance_id=auto.id, amount="1")
    with pytest.raises(RecordLocked):
        advance_service.delete_advance(advance_id=auto.id)

    # the debt still reaches the next cycle
    attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 3),
                                         status=AttendanceRecord.Status.PRESENT)
    c2 = db_engine.create_salary(worker.id, date(2024, 1, 3))
    assert c2.total_advance == Decimal("200.00")
    assert c2.net_pay == Decimal("300.00")

@pytest.mark.django_db
def test_shortfall_reason_is_reserved(worker):
    with pytest.raises(Conflict):
        advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 2), amount="100",
                                       reason=f"{SHORTFALL_REASON_PREFIX} for cycle 2024-01-01 to 2024-01-02")
    assert not Advance.objects.exists()

    adv = advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 2), amount="100", reason="rent")
    with pytest.raises(Conflict):
        advance_service.update_advance(advance_id=adv.id, reason=SHORTFALL_REASON_PREFIX)
    adv.refresh_from_db()
    assert adv.reason == "rent"
    assert adv.is_shortfall is False

@pytest.mark.django_db
def test_advance_total_and_latest(worker, other_worker):
    for day, amount in ((2, "100"), (5, "50"), (20, "30")):
        advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, day), amount=amount)

    assert advance_selector.worker_advance_total(worker.id)["total"] == Decimal("180.00")
    report = advance_selector.worker_advance_total(worker.id, {"start_date": "2024-01-03", "end_date": "2024-01-10"})
    assert report["total"] == Decimal("50.00")
    assert report["start_date"] == date(2024, 1, 3)
    assert advance_selector.worker_advance_total(other_worker.id)["total"] == Decimal("0.00")

    with pytest.raises(InvalidDate):
        advance_selector.worker_advance_total(worker.id, {"start_date": "2024-01-10", "end_date": "2024-01-03"})
    with pytest.raises(NotFound):
        advance_selector.worker_advance_total(999)

    rows = {w.id: w for w in advance_selector.workers_with_latest_advance()}
    assert rows[worker.id].latest_advance_date == date(2024, 1, 20)
    assert rows[worker.id].latest_advance_amount == Decimal("30.00")
    assert rows[other_worker.id].latest_advance_id is None


# ============================
# Expenses
# ============================
@pytest.mark.django_db
def test_expense_lifecycle(worker, expense_type, paid_cycle):
    with pytest.raises(RecordLocked):
        expense_service.create_expense(worker_id=worker.id, date=date(2024, 1, 10), amount="40",
                                       type_id=expense_type.id)

    exp = expense_service.create_expense(worker_id=worker.id, date=date(2024, 1, 11), amount="40",
                                         type_id=expense_type.id, note="lunch")
    exp = expense_service.update_expense(expense_id=exp.id, amount="45.50")
    assert exp.amount == Decimal("45.50")

    with pytest.raises(RecordLocked):
        expense_service.update_expense(expense_id=exp.id, date=date(2024, 1, 5))

    expense_service.delete_expense(expense_id=exp.id)
    assert not Expense.objects.filter(id=exp.id).exists()

@pytest.mark.django_db
def test_expense_unknown_type(worker):
    with pytest.raises(NotFound):
        expense_service.create_expense(worker_id=worker.id, date=date(2024, 1, 2), amount="10", type_id=555)

@pytest.mark.django_db
def test_default_expense_types_seeded_once():
    names = [t.name for t in expense_service.list_expense_types()]
    assert names == ["Food", "Other"]
    assert expense_service.list_expense_types().count() == 2

@pytest.mark.django_db
def test_expense_type_names_unique(expense_type):
    with pytest.raises(Conflict):
        expense_service.create_expense_type(name="food")
    t = expense_service.create_expense_type(name="Travel")
    assert t.name in [x.name for x in expense_service.list_expense_types()]


# ============================
# Workers
# ============================
@pytest.mark.django_db
def test_worker_create_and_list():
    w = worker_service.create_worker(name="Anil", wage="450", joined_at=date(2024, 1, 1))
    assert w.ot_rate == Decimal("0.00")
    assert w.is_active is True
    worker_service.set_worker_active(worker_id=w.id, is_active=False)
    assert list(worker_service.list_workers(active=True)) == []
    assert [x.id for x in worker_service.list_workers(active=False)] == [w.id]

@pytest.mark.django_db
def test_worker_rejects_negative_wage():
    with pytest.raises(InvalidAmount):
        worker_service.create_worker(name="Anil", wage="-1", joined_at=date(2024, 1, 1))

@pytest.mark.django_db
def test_scheduled_inactivation(worker, expense_type):
    worker = worker_service.set_worker_active(worker_id=worker.id, is_active=False, effective_from=date(2024, 1, 10))
    assert worker.is_active is True
    assert worker.inactive_from == date(2024, 1, 10)

    attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 9), status="PRESENT")
    with pytest.raises(InactiveWorker):
        attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 10), status="PRESENT")
    with pytest.raises(InactiveWorker):
        expense_service.create_expense(worker_id=worker.id, date=date(2024, 1, 12), amount="10",
                                       type_id=expense_type.id)
    with pytest.raises(InactiveWorker):
        advance_service.create_advance(worker_id=worker.id, date=date(2024, 1, 11), amount="10")

    worker = worker_service.set_worker_active(worker_id=worker.id, is_active=True)
    assert worker.inactive_from is None
    attendance_service.create_attendance(worker_id=worker.id, date=date(2024, 1, 10), status="PRESENT")

@pytest.mark.django_db
def test_inactivation_before_join_rejected(worker):
    with pytest.raises(InvalidDate):
        worker_service.set_worker_active(worker_id=worker.id, is_active=False, effective_from=date(2023, 12, 1))

@pytest.mark.django_db
def test_wage_history_records_rate_changes():
    w = worker_service.create_worker(name="Anil", wage="450", ot_rate="40", joined_at=date(2024, 1, 1))
    [initial] = worker_service.get_wage_history(w.id)
    assert (initial.wage, initial.effective_from, initial.reason) == (Decimal("450.00"), date(2024, 1, 1), "Initial wage")

    rec = attendance_service.create_attendance(worker_id=w.id, date=date(2024, 1, 20), status="PRESENT")
    worker_service.update_worker(worker_id=w.id, wage="500", wage_effective_date=date(2024, 1, 15))

    assert worker_service.get_rate_on(w.id, date(2024, 1, 10)).wage == Decimal("450.00")
    latest = worker_service.get_rate_on(w.id, date(2024, 1, 20))
    assert (latest.wage, latest.ot_rate) == (Decimal("500.00"), Decimal("40.00"))
    with pytest.raises(NotFound):
        worker_service.get_rate_on(w.id, date(2023, 12, 31))

    # snapshot on existing attendance is untouched
    rec.refresh_from_db()
    assert rec.wage_at_time == Decimal("450.00")

    # same value is not a change
    worker_service.update_worker(worker_id=w.id, wage="500")
    assert WageHistory.objects.filter(worker=w).count() == 2

@pytest.mark.django_db
def test_rate_change_inside_salary_cycle_rejected():
    w = worker_service.create_worker(name="Anil", wage="450", ot_rate="40", joined_at=date(2024, 1, 1))
    SalaryCycle.objects.create(worker=w, cycle_start=date(2024, 1, 1), cycle_end=date(2024, 1, 20),
                               net_pay=Decimal("4500"))

    with pytest.raises(RecordLocked):
        worker_service.update_worker(worker_id=w.id, ot_rate="60", ot_rate_effective_date=date(2024, 1, 18))
    w.refresh_from_db()
    assert w.ot_rate == Decimal("40.00")
    assert WageHistory.objects.filter(worker=w).count() == 1

    worker_service.update_worker(worker_id=w.id, ot_rate="60", ot_rate_effective_date=date(2024, 1, 21))
    w.refresh_from_db()
    assert w.ot_rate == Decimal("60.00")
    assert worker_service.get_rate_on(w.id, date(2024, 1, 21)).ot_rate == Decimal("60.00")
