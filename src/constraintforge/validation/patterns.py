"""Default regex patterns for number validation.

Both patterns can be replaced by the caller, e.g. to accept a comma as the
decimal separator.
"""

import re

# Positive or negative whole number
NUMBER_PATTERN = re.compile(r"^-?\d+$")


def fraction_number_pattern(fraction_length: int) -> "re.Pattern[str]":
    """Pattern for a number with at most ``fraction_length`` decimals.

    With a fraction length of 4 this accepts "12", "-12.3" and "12.3456",
    but not "12.34567" or "12.".
    """
    return re.compile(r"^-?\d+(\.\d{1,%d})?$" % fraction_length)
