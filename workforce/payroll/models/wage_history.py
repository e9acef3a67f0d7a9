from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator
from .mixins import TimeStampedModel


class WageHistory(TimeStampedModel):
    """Append-only log of a worker's rates and the date each took effect."""
    worker = models.ForeignKey("payroll.Worker", on_delete=models.CASCADE, related_name="wage_history")
    wage = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.00"))])
    ot_rate = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    effective_from = models.DateField()
    reason = models.CharField(max_length=200, blank=True, default="")

    class Meta:
        db_table = "WageHistory"
        ordering = ["-effective_from", "-id"]
        indexes = [
            models.Index(fields=["worker", "effective_from"]),
        ]

    def __str__(self):
        return f"{self.worker_id} {self.effective_from} wage={self.wage} ot={self.ot_rate}"
