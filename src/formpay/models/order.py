"""Order record written to the spreadsheet for each completed checkout."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

PAYMENT_STATUS_COMPLETED = "completed"

# Metadata key that carries the customer name set at session creation.
NAME_METADATA_KEY = "customerName"

# Column order of the destination sheet, before the pass-through columns.
FIXED_COLUMNS: tuple[str, ...] = (
    "timestamp",
    "name",
    "email",
    "paymentStatus",
    "paymentId",
    "paymentAmount",
)


class OrderRecord(BaseModel):
    """A completed order, flattened from a Checkout Session.

    Amounts are held in major currency units.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    name: str = Field(..., description="Customer name from session metadata")
    email: str = Field(..., description="Customer email from Checkout")
    payment_status: str = Field(default=PAYMENT_STATUS_COMPLETED)
    payment_id: str = Field(..., description="PaymentIntent ID", examples=["pi_3ABC123DEF456"])
    payment_amount: Decimal = Field(..., description="Amount in major units", examples=["29.99"])
    timestamp: str = Field(..., description="ISO-8601 processing time")
    extra_fields: dict[str, str] = Field(
        default_factory=dict,
        description="Remaining metadata keys, passed through verbatim",
    )

    def as_flat_dict(self) -> dict[str, Any]:
        """Flatten to the wire field names.

        Well-known fields take precedence over a metadata key with the same name.
        """
        flat: dict[str, Any] = dict(self.extra_fields)
        flat.update(
            {
                "name": self.name,
                "email": self.email,
                "paymentStatus": self.payment_status,
                "paymentId": self.payment_id,
                "paymentAmount": self.payment_amount,
                "timestamp": self.timestamp,
            }
        )
        return flat

    def to_row(self, extra_columns: tuple[str, ...] | list[str] = ()) -> list[str]:
        """Render as one positional sheet row.

        Args:
            extra_columns: Metadata keys to append after FIXED_COLUMNS, in order.
                Missing keys render as empty strings.

        Returns:
            Cell values matching the destination column layout.
        """
        flat = self.as_flat_dict()
        row = [str(flat[column]) for column in FIXED_COLUMNS]
        row.extend(self.extra_fields.get(column, "") for column in extra_columns)
        return row
