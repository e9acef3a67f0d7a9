import pytest
from datetime import date
from decimal import Decimal

from payroll.models import Worker, ExpenseType, SalaryCycle
from payroll.services.salary_service import SalaryEngine
from payroll.tests.fakes import InMemoryRecordStore, NOW, TODAY


# ---- in-memory engine
@pytest.fixture
def store():
    return InMemoryRecordStore()

@pytest.fixture
def engine(store):
    return SalaryEngine(store=store, clock=lambda: TODAY, now=lambda: NOW)

@pytest.fixture
def fake_worker(store):
    # joined 2024-01-01, 500/day, 50 per OT unit
    return store.add_worker()

# ---- database
@pytest.fixture
def worker(db):
    return Worker.objects.create(
        name="Ravi Kumar", phone="9876543210",
        wage=Decimal("500.00"), ot_rate=Decimal("50.00"), joined_at=date(2024, 1, 1),
    )

@pytest.fixture
def other_worker(db):
    return Worker.objects.create(
        name="Sita Devi", wage=Decimal("400.00"), ot_rate=Decimal("40.00"), joined_at=date(2024, 1, 1),
    )

@pytest.fixture
def expense_type(db):
    return ExpenseType.objects.create(name="Food")

@pytest.fixture
def db_engine(db):
    return SalaryEngine(clock=lambda: TODAY)

@pytest.fixture
def paid_cycle(worker):
    return SalaryCycle.objects.create(
        worker=worker, cycle_start=date(2024, 1, 1), cycle_end=date(2024, 1, 10),
        net_pay=Decimal("5000.00"), total_paid=Decimal("5000.00"), status=SalaryCycle.Status.PAID,
    )

@pytest.fixture
def partial_cycle(worker):
    return SalaryCycle.objects.create(
        worker=worker, cycle_start=date(2024, 1, 1), cycle_end=date(2024, 1, 10),
        net_pay=Decimal("5000.00"), total_paid=Decimal("1000.00"), status=SalaryCycle.Status.PARTIAL,
    )
