"""Brazilian CPF check-digit validation."""

from ...core.utils import digits_only

CPF_LENGTH = 11


def _check_digit(digits: str, weight_start: int) -> int:
    total = sum(int(digit) * weight for digit, weight in zip(digits, range(weight_start, 1, -1)))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def is_valid_cpf(value: str) -> bool:
    """Return True when ``value`` holds a CPF with correct check digits.

    Formatting characters are ignored. Sequences of one repeated digit
    (e.g. 111.111.111-11) pass the arithmetic but are never issued, so
    they are rejected.
    """
    cpf = digits_only(value)
    if len(cpf) != CPF_LENGTH or len(set(cpf)) == 1:
        return False

    if _check_digit(cpf[:9], 10) != int(cpf[9]):
        return False
    return _check_digit(cpf[:10], 11) == int(cpf[10])
