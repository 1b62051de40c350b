"""
Serializes unit search results for download as CSV or JSON
"""
import json
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from app.models.export import ExportFormat
from app.models.unit import Unit


def _format_currency(value) -> str:
    return f"${value:.2f}"


def _format_list(value) -> str:
    return "; ".join(value)


def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_text(value) -> str:
    if hasattr(value, "value"):  # enums
        return str(value.value)
    return str(value)


# Column header -> (Unit attribute, formatter), in display order
EXPORT_FIELDS: Dict[str, Tuple[str, Callable]] = {
    "Community": ("community_name", _format_text),
    "Unit Number": ("unit_number", _format_text),
    "Bedrooms": ("bedrooms", _format_number),
    "Bathrooms": ("bathrooms", _format_number),
    "Square Feet": ("square_feet", _format_number),
    "Monthly Rent": ("monthly_rent", _format_currency),
    "Availability": ("availability", _format_text),
    "Features": ("features", _format_list),
    "Floor Plan": ("floor_plan", _format_text),
    "Virtual Tour": ("virtual_tour_url", _format_text),
}

CSV_SPECIAL_CHARS = (",", "\"", "\n")

MIME_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
}


def unknown_export_fields(fields: Optional[Sequence[str]]) -> List[str]:
    return [field for field in fields or [] if field not in EXPORT_FIELDS]


def resolve_export_fields(fields: Optional[Sequence[str]] = None) -> List[str]:
    """Selected columns in display order; no selection means every column"""
    if not fields:
        return list(EXPORT_FIELDS)
    requested = set(fields)
    return [field for field in EXPORT_FIELDS if field in requested]


def escape_csv_field(value: str) -> str:
    """Quote a field only when it holds a comma, quote or line break"""
    if any(char in value for char in CSV_SPECIAL_CHARS):
        return '"' + value.replace('"', '""') + '"'
    return value


def units_to_csv(units: Sequence[Unit], fields: Optional[Sequence[str]] = None) -> str:
    """CSV with a header row; an empty unit list gives an empty string"""
    if not units:
        return ""

    columns = resolve_export_fields(fields)
    lines = [",".join(escape_csv_field(column) for column in columns)]

    for unit in units:
        row = []
        for column in columns:
            attribute, formatter = EXPORT_FIELDS[column]
            value = getattr(unit, attribute)
            row.append("" if value is None else escape_csv_field(formatter(value)))
        lines.append(",".join(row))

    return "\n".join(lines)


def units_to_json(units: Sequence[Unit]) -> str:
    return json.dumps(
        [unit.model_dump(mode="json", by_alias=True) for unit in units],
        indent=2,
    )


def format_units(units: Sequence[Unit], output_kind, selected_fields: Optional[Sequence[str]] = None
                 ) -> Tuple[bytes, str, str]:
    """Return (payload, suggested file name, MIME type) for the requested format"""
    output_kind = ExportFormat(output_kind)
    timestamp = date.today().isoformat()

    if output_kind == ExportFormat.CSV:
        payload = units_to_csv(units, selected_fields)
    else:
        payload = units_to_json(units)

    file_name = f"units-export-{timestamp}.{output_kind.value}"
    return payload.encode("utf-8"), file_name, MIME_TYPES[output_kind]
