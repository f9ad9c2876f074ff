"""
CSV import and export formats for the license ledger.
"""
import csv
import io
from typing import Iterable, List

from licenses.domain.license import License

EXPORT_HEADER = ["Email", "Status", "Date Added", "Activated At"]
DATE_FORMAT = "%m/%d/%Y"


def parse_import(content: str) -> List[str]:
    """
    Extract emails from an uploaded CSV.

    Blank lines are dropped, the first remaining line is always treated
    as a header, and the first comma-separated field of every other line
    is the email.

    Args:
        content: Decoded file content

    Returns:
        Raw (un-normalized) email strings in file order
    """
    lines = [line for line in content.splitlines() if line.strip()]
    emails = []
    for line in lines[1:]:
        first_field = line.split(",", 1)[0].strip().strip('"').strip()
        if first_field:
            emails.append(first_field)
    return emails


def render_export(licenses: Iterable[License]) -> str:
    """
    Serialize licenses to CSV.

    Args:
        licenses: Licenses in the caller's scope

    Returns:
        CSV text with a header row
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for license in licenses:
        writer.writerow(
            [
                str(license.email),
                license.status_label,
                license.created_at.strftime(DATE_FORMAT),
                license.activated_at.strftime(DATE_FORMAT) if license.activated_at else "N/A",
            ]
        )
    return buffer.getvalue()
