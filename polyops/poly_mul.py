from typing import List
from gmpy2 import mpz

from polyops.fmpz import ZERO
from polyops.fmpz_vec import Window

# =============================================================================
# Konstanten

# Unterhalb dieser Länge des kürzeren Faktors wird klassisch multipliziert
MUL_KARATSUBA_CUTOFF = 16

# =============================================================================
# Multiplikation auf Listen

def _mul_classical(a: List[mpz], b: List[mpz]) -> List[mpz]:
    """Schulmethode, Ergebnislänge len(a) + len(b) - 1."""
    out = [ZERO] * (len(a) + len(b) - 1)
    for i, ai in enumerate(a):
        if ai == 0:
            continue
        for j, bj in enumerate(b):
            out[i + j] += ai * bj
    return out

def _add_into(out: List[mpz], src: List[mpz], shift: int) -> None:
    """out[shift:] += src"""
    for i, c in enumerate(src):
        out[shift + i] += c

def _sub_into(out: List[mpz], src: List[mpz]) -> None:
    for i, c in enumerate(src):
        out[i] -= c

def _add_lists(a: List[mpz], b: List[mpz]) -> List[mpz]:
    if len(a) < len(b):
        a, b = b, a
    out = list(a)
    _add_into(out, b, 0)
    return out

def _mul_karatsuba(a: List[mpz], b: List[mpz]) -> List[mpz]:
    """
    Karatsuba-Multiplikation, erwartet len(a) >= len(b) >= 1.
    Rückgabe: Produkt der Länge len(a) + len(b) - 1.
    """
    len1, len2 = len(a), len(b)
    if len2 < MUL_KARATSUBA_CUTOFF or len2 == 1:
        return _mul_classical(a, b)

    m = (len1 + 1) // 2
    if len2 <= m:
        # stark unbalanciert: a in Blöcke der Länge len2 zerlegen
        out = [ZERO] * (len1 + len2 - 1)
        for k in range(0, len1, len2):
            chunk = a[k:k + len2]
            if len(chunk) >= len2:
                part = _mul_karatsuba(chunk, b)
            else:
                part = _mul_karatsuba(b, chunk)
            _add_into(out, part, k)
        return out

    a0, a1 = a[:m], a[m:]
    b0, b1 = b[:m], b[m:]
    z0 = _mul_karatsuba(a0, b0)
    z2 = _mul_karatsuba(a1, b1) if len(a1) >= len(b1) else _mul_karatsuba(b1, a1)
    s = _add_lists(a0, a1)
    t = _add_lists(b0, b1)
    z1 = _mul_karatsuba(s, t) if len(s) >= len(t) else _mul_karatsuba(t, s)
    _sub_into(z1, z0)
    _sub_into(z1, z2)

    out = [ZERO] * (len1 + len2 - 1)
    _add_into(out, z0, 0)
    _add_into(out, z1, m)
    _add_into(out, z2, 2 * m)
    return out

# =============================================================================
# Multiplikation auf Fenstern

def _poly_mul(res: Window, poly1: Window, poly2: Window) -> None:
    """
    Schreibt poly1 * poly2 nach res.
    Voraussetzung: len(poly1) >= len(poly2) >= 1 und len(res) = len(poly1) + len(poly2) - 1.
    res darf sich nicht mit poly1 oder poly2 überlappen.
    """
    len1, len2 = len(poly1), len(poly2)
    if len2 < 1 or len1 < len2:
        raise ValueError(f"_poly_mul expects len1 >= len2 >= 1, got {len1} and {len2}")
    if len(res) != len1 + len2 - 1:
        raise ValueError(f"Result window has length {len(res)}, expected {len1 + len2 - 1}")
    product = _mul_karatsuba(poly1.to_list(), poly2.to_list())
    for i, c in enumerate(product):
        res[i] = c

def mul_lists(a: List[mpz], b: List[mpz]) -> List[mpz]:
    """
    Multipliziert zwei Koeffizientenlisten beliebiger Reihenfolge, leere Liste = Nullpolynom.
    """
    if not a or not b:
        return []
    if len(a) < len(b):
        a, b = b, a
    return _mul_karatsuba(a, b)
