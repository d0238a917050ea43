# sales/models/sequence.py

from django.db import models


class SequenceCounter(models.Model):
    """
    Last issued value per numbering scope (e.g. "SALE-2026", "WRN-2026").

    Locked with select_for_update while the next value is taken.
    """

    scope = models.CharField(max_length=64, unique=True)
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["scope"]

    def __str__(self):
        return f"{self.scope}: {self.last_value}"
