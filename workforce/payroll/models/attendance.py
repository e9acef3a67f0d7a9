from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator
from .mixins import TimeStampedModel


class AttendanceRecord(TimeStampedModel):
    class Status(models.TextChoices):
        PRESENT = "PRESENT", "Present"
        HALF = "HALF", "Half day"
        ABSENT = "ABSENT", "Absent"

    worker = models.ForeignKey("payroll.Worker", on_delete=models.CASCADE, related_name="attendance")
    date = models.DateField(db_index=True)
    status = models.CharField(max_length=8, choices=Status.choices)
    ot_units = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    note = models.CharField(max_length=500, blank=True, default="")

    # rate snapshot, never rewritten after creation
    wage_at_time = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    ot_rate_at_time = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        db_table = "Attendance"
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(fields=["worker", "date"], name="uniq_attendance_worker_date"),
        ]
        indexes = [
            models.Index(fields=["worker", "date"]),
        ]

    def __str__(self):
        return f"ATTD {self.worker_id} {self.date} [{self.status}]"
