from doctrack.core.modules.section.models import Section
from doctrack.errors import ValidationError
from doctrack.utils import is_iso_date


def validate_section(section: str | None) -> Section:
    """Validate a section code and return it as a Section.

    Raises:
        ValidationError: If the code is missing or not one of the office sections
    """
    if not section:
        raise ValidationError("Section is required")
    try:
        return Section(section.strip().upper())
    except ValueError:
        allowed = ", ".join(Section)
        raise ValidationError(f"Unknown section '{section}', expected one of: {allowed}") from None


def validate_date(value: str | None, name: str = "dateReceived") -> str:
    """Validate a YYYY-MM-DD calendar date and return it unchanged.

    Raises:
        ValidationError: If the date is missing or malformed
    """
    if not value:
        raise ValidationError(f"{name} is required")
    if not is_iso_date(value):
        raise ValidationError(f"{name} must be a calendar date in YYYY-MM-DD format, got '{value}'")
    return value


def validate_optional_date(value: str | None, name: str) -> str | None:
    if value is None or value == "":
        return None
    return validate_date(value, name)


def validate_partition(section: str | None, date_received: str | None) -> tuple[Section, str]:
    """Validate the (section, dateReceived) pair every numbering operation is keyed on."""
    return validate_section(section), validate_date(date_received)
