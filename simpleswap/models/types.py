"""Boundary types for asset/account addresses and uint256 amounts.

Amounts cross the HTTP boundary as decimal strings so that values above
2**53 survive JSON clients unchanged. Addresses are 20-byte hex strings;
the engine compares them in lowercase form only.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from simpleswap.constants import UINT256_MAX

_ADDRESS_RE = re.compile(r"^0x[0-9a-f]{40}$")


def validate_uint256(value: Any) -> str:
    """Coerce an int or decimal string into a canonical uint256 string.

    Raises:
        ValueError: If the value is not an integer in [0, 2**256 - 1]
    """
    if isinstance(value, str):
        try:
            parsed = int(value, 10)
        except ValueError as err:
            raise ValueError(f"Not a decimal integer: {value!r}") from err
    elif isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    else:
        raise ValueError(f"Expected a decimal string or int, got {type(value).__name__}")

    if not 0 <= parsed <= UINT256_MAX:
        raise ValueError(f"Outside uint256 range: {value}")
    return str(parsed)


# Asset or account address, 0x followed by 40 hex digits (any case)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# uint256 carried as a decimal string
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="uint256 amount as a decimal string"),
]


def is_valid_address(address: str) -> bool:
    """True for a lowercase-or-mixed-case ``0x`` + 40 hex digit string."""
    return isinstance(address, str) and _ADDRESS_RE.match(address.lower()) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and add a missing ``0x`` prefix.

    With ``validate=True`` a result that is not a well-formed address
    raises ValueError; otherwise malformed input is normalized as far as
    possible and returned.
    """
    if not isinstance(address, str):
        raise ValueError(f"Address must be a string, got {type(address).__name__}")
    normalized = address.lower()
    if not normalized.startswith("0x"):
        normalized = f"0x{normalized}"
    if validate and not is_valid_address(normalized):
        raise ValueError(f"Invalid address: {address}")
    return normalized
