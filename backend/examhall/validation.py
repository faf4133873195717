"""Input checks shared by the exam core. Each failure raises ValidationError."""
import re

from .errors import ValidationError

INT32_BOUNDS = (-2**31, 2**31 - 1)
INT64_BOUNDS = (-2**63, 2**63 - 1)

_INTEGER_TEXT = re.compile(r'-?\d+', re.ASCII)


def missing_fields(**values) -> list:
    """Return the names of values that are None or blank strings."""
    missing = []
    for name, value in values.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def require(**values):
    missing = missing_fields(**values)
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}", fields=missing)


def parse_int(value, bounds=INT64_BOUNDS):
    """
    Return value as an int, or None when it is not a whole number inside bounds.

    Accepts ints, floats without a fractional part and ASCII digit strings.
    Booleans are not numbers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and _INTEGER_TEXT.fullmatch(value.strip()):
        number = int(value.strip())
    else:
        return None
    low, high = bounds
    if not low <= number <= high:
        return None
    return number


def check_lengths(model, labels=None, **values):
    """
    Reject strings longer than the max_length of the model field of the same
    name. labels maps field names to the names reported back to the caller.
    """
    labels = labels or {}
    too_long = []
    for name, value in values.items():
        limit = model._meta.get_field(name).max_length
        if limit and isinstance(value, str) and len(value) > limit:
            too_long.append(labels.get(name, name))
    if too_long:
        raise ValidationError(f"Too long: {', '.join(too_long)}", fields=too_long)
