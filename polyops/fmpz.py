from typing import List
from gmpy2 import mpz, mpq

# =============================================================================
# Koeffizienten (exakte Ganzzahlen beliebiger Länge)

ZERO = mpz(0)

def parse_to_int(value, name: str) -> mpz:
    """
    Konvertiert einen Integer oder String (auch mit Präfix 0x/0o/0b) in ein mpz.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid number format for {name}: {value}")
    if isinstance(value, int):
        return mpz(value)
    if isinstance(value, str):
        try:
            return mpz(int(value.strip(), 0))
        except Exception:
            raise ValueError(f"Invalid number format for {name}: {value}")
    if value is None:
        raise ValueError(f"Missing argument {name}")
    raise ValueError(f"Invalid number format for {name}: {value}")

def parse_to_rational(value, name: str) -> mpq:
    """
    Wie parse_to_int, akzeptiert zusätzlich Brüche der Form "p/q".
    """
    if isinstance(value, str) and "/" in value:
        num, _, den = value.partition("/")
        d = parse_to_int(den, name)
        if d == 0:
            raise ValueError(f"Zero denominator in {name}: {value}")
        return mpq(parse_to_int(num, name), d)
    return mpq(parse_to_int(value, name))

def parse_coeffs(values, name: str) -> List[mpz]:
    """
    Liest eine Koeffizientenliste (konstantes Glied zuerst) ein.
    """
    if not isinstance(values, list):
        raise ValueError(f"Argument {name} must be a list of coefficients")
    return [parse_to_int(v, f"{name}[{i}]") for i, v in enumerate(values)]

def to_32bit_or_hex(x):
    """
    Gibt x als int zurück, wenn es in 32 Bit passt, sonst die Hex-Darstellung.
    """
    x = int(x)
    if x in range(-(2 ** 31), 2 ** 31):
        return x
    return hex(x)

def rational_to_json(x):
    """
    Ganzzahlige Brüche wie to_32bit_or_hex, sonst String "p/q".
    """
    x = mpq(x)
    if x.denominator == 1:
        return to_32bit_or_hex(x.numerator)
    return f"{int(x.numerator)}/{int(x.denominator)}"

def coeffs_to_json(coeffs) -> list:
    return [to_32bit_or_hex(c) for c in coeffs]
