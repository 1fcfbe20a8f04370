"""CSV exports of the inventory."""

import csv
import io

from gasstock.core.entities import CategoryDetail, CylinderDetail

CYLINDER_HEADERS = [
    "Serial Number",
    "Type",
    "Gas Type",
    "Capacity",
    "Status",
    "Location",
    "Fill Level",
    "Next Inspection",
    "Maintenance Due",
    "Assigned Customer",
]

CATEGORY_HEADERS = [
    "Category",
    "Gas Type",
    "Location",
    "Status",
    "Total",
    "Filled",
    "Empty",
    "Requires Restock",
    "Last Restocked",
]


def _or_na(value: object) -> object:
    return "N/A" if value is None or value == "" else value


def cylinders_to_csv(cylinders: list[CylinderDetail]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CYLINDER_HEADERS)
    for c in cylinders:
        writer.writerow([
            c.serial_number,
            _or_na(c.type_name),
            _or_na(c.gas_type),
            _or_na(c.capacity),
            c.status.value,
            _or_na(c.location),
            _or_na(c.fill_level),
            _or_na(c.next_inspection_date.isoformat() if c.next_inspection_date else None),
            _or_na(c.maintenance_due_date.isoformat() if c.maintenance_due_date else None),
            _or_na(c.assigned_customer_name),
        ])
    return output.getvalue()


def categories_to_csv(categories: list[CategoryDetail]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CATEGORY_HEADERS)
    for c in categories:
        writer.writerow([
            c.category_name,
            _or_na(c.gas_type),
            _or_na(c.location),
            c.status.value,
            c.total_quantity,
            c.filled_quantity,
            c.empty_quantity,
            "yes" if c.requires_restock else "no",
            _or_na(c.last_restocked.isoformat() if c.last_restocked else None),
        ])
    return output.getvalue()
