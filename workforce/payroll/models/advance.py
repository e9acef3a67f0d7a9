from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator
from .mixins import TimeStampedModel

# Reason prefix reserved for advances the settlement engine creates itself.
SHORTFALL_REASON_PREFIX = "Auto advance: salary shortfall"


class Advance(TimeStampedModel):
    worker = models.ForeignKey("payroll.Worker", on_delete=models.CASCADE, related_name="advances")
    date = models.DateField(db_index=True)
    amount = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    reason = models.CharField(max_length=500, blank=True, default="")
    signature = models.TextField(null=True, blank=True)
    salary = models.ForeignKey(
        "payroll.SalaryCycle", null=True, blank=True, on_delete=models.SET_NULL,
        related_name="advances",
        help_text="Cycle that deducted this advance. Set means locked.",
    )

    class Meta:
        db_table = "Advance"
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["worker", "date"]),
        ]

    @property
    def is_shortfall(self) -> bool:
        return (self.reason or "").startswith(SHORTFALL_REASON_PREFIX)

    def __str__(self):
        return f"ADV {self.worker_id} {self.date} {self.amount}"
