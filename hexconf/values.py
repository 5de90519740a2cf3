"""Value nodes shared by the parser output and the resolved environment.

``ConstRef`` only ever appears before resolution.
"""

from dataclasses import dataclass, field

UINT64_MASK = (1 << 64) - 1

HEX_DIGITS = "0123456789abcdefABCDEF"


def parse_hex(lexeme):
    """Decode a ``0x``/``0X`` literal as an unsigned 64-bit integer.

    Longer literals wrap around, keeping the low 64 bits.
    """
    digits = lexeme[2:]
    if lexeme[:2] not in ("0x", "0X") or not digits or any(c not in HEX_DIGITS for c in digits):
        raise ValueError(f"Invalid hex number: '{lexeme}'")
    return int(digits, 16) & UINT64_MASK


@dataclass(frozen=True)
class Number:
    lexeme: str
    value: int

    @classmethod
    def from_lexeme(cls, lexeme):
        return cls(lexeme, parse_hex(lexeme))


@dataclass(frozen=True)
class Dict:
    fields: dict[str, "Number | Dict | ConstRef"] = field(default_factory=dict)


@dataclass(frozen=True)
class ConstRef:
    name: str


def to_python(value):
    """Convert a resolved value into plain ints and dicts."""
    if isinstance(value, Number):
        return value.value
    if isinstance(value, Dict):
        return {name: to_python(v) for name, v in value.fields.items()}
    if isinstance(value, ConstRef):
        raise TypeError(f"Unresolved constant reference: {value.name}")
    raise TypeError(f"Unknown value type: {type(value).__name__}")
