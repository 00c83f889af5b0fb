import re

NON_DIGITS = re.compile(r"\D")


def normalize_phone_number(phone: str) -> str:
    """Best-effort E.164 for North American numbers.

    10 digits get a ``+1`` prefix, 11 digits starting with 1 get ``+``. Anything
    else is passed through unchanged for the provider to judge.
    """
    digits = NON_DIGITS.sub("", phone)
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    return phone
