"""
Downloadable CSV template for bulk shipment import.
"""

import csv
import io
import json
from datetime import date, timedelta

from tms.common.identifiers import new_shipment_number
from tms.models.entities.base import utc_today

TEMPLATE_HEADER = [
    "ShipmentNumber",
    "Origin",
    "Destination",
    "CustomerID",
    "Status",
    "Priority",
    "EstimatedPickupDate",
    "EstimatedDeliveryDate",
    "ItemsJSON",
]

SAMPLE_ITEMS = [{"name": "Sample Item", "quantity": 10, "weightKg": 5, "isFragile": False}]


def build_template(
    customer_id: str = "cust1",
    today: date | None = None,
    delivery_offset_days: int = 5,
) -> str:
    """
    Header plus one example row, every field quoted.

    The example row imports without drops as long as ``customer_id`` exists.
    """
    today = today or utc_today()
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(",".join(TEMPLATE_HEADER) + "\n")
    writer.writerow(
        [
            new_shipment_number(today),
            "New York, NY",
            "Los Angeles, CA",
            customer_id,
            "Pending",
            "Medium",
            today.isoformat(),
            (today + timedelta(days=delivery_offset_days)).isoformat(),
            json.dumps(SAMPLE_ITEMS, separators=(",", ":")),
        ]
    )
    return buffer.getvalue()
