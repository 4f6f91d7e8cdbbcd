"""Payment method classification for free-text chat input."""
from typing import Optional, Sequence


def match_payment_method(user_input: str, labels: Sequence[str]) -> Optional[str]:
    """Classify customer input as one of the configured payment labels.

    The input matches a label when it appears, case-insensitively, anywhere
    inside that label ("cash" matches "Cash on Delivery"). The first matching
    label wins. Returns None when nothing matches; the caller keeps asking.
    """
    needle = user_input.strip().lower()
    if not needle:
        return None
    for label in labels:
        if needle in label.lower():
            return label
    return None
