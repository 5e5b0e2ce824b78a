from typing import List, Iterable, Tuple
from gmpy2 import mpz

from polyops import divconquer
from polyops.fmpz import ZERO, parse_coeffs, coeffs_to_json
from polyops.fmpz_vec import Window, vec_init
from polyops.poly_mul import mul_lists

def normalise(coeffs: List[mpz]) -> List[mpz]:
    """Entfernt führende Nullkoeffizienten, das Nullpolynom wird zur leeren Liste."""
    i = len(coeffs)
    while i > 0 and coeffs[i - 1] == 0:
        i -= 1
    return coeffs[:i]

class FmpzPoly:
    """Polynom über Z mit Koeffizientenliste in aufsteigender Gradordnung (konstantes Glied zuerst)."""
    __slots__ = ('coeffs',)

    def __init__(self, coeffs: Iterable = ()):
        """Initialisiert ein Polynom aus Ganzzahlen und normalisiert führende Nullen."""
        self.coeffs = normalise([mpz(c) for c in coeffs])

    @classmethod
    def from_json(cls, arr, name: str) -> 'FmpzPoly':
        """Erzeugt ein Polynom aus einer JSON-Liste (int oder String mit Präfix)."""
        return cls(parse_coeffs(arr, name))

    @staticmethod
    def zero() -> 'FmpzPoly':
        return FmpzPoly()

    def __len__(self) -> int:
        return len(self.coeffs)

    def deg(self) -> int:
        """Grad des Polynoms, -1 für das Nullpolynom."""
        return len(self.coeffs) - 1

    def is_zero(self) -> bool:
        return len(self.coeffs) == 0

    def to_json(self) -> list:
        return coeffs_to_json(self.coeffs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FmpzPoly):
            return NotImplemented
        return self.coeffs == other.coeffs

    def __repr__(self) -> str:
        return f"FmpzPoly({[int(c) for c in self.coeffs]!r})"

    # =============================================================================
    # Polynom-Arithmetik

    def add(self, other: 'FmpzPoly') -> 'FmpzPoly':
        n = max(len(self.coeffs), len(other.coeffs))
        a = self.coeffs + [ZERO] * (n - len(self.coeffs))
        b = other.coeffs + [ZERO] * (n - len(other.coeffs))
        return FmpzPoly(x + y for x, y in zip(a, b))

    def neg(self) -> 'FmpzPoly':
        return FmpzPoly(-c for c in self.coeffs)

    def sub(self, other: 'FmpzPoly') -> 'FmpzPoly':
        return self.add(other.neg())

    def mul(self, other: 'FmpzPoly') -> 'FmpzPoly':
        """Multipliziert zwei Polynome (Karatsuba ab MUL_KARATSUBA_CUTOFF)."""
        return FmpzPoly(mul_lists(self.coeffs, other.coeffs))

    # =============================================================================
    # Operator-Weiterleitungen

    def __add__(self, other: 'FmpzPoly') -> 'FmpzPoly':
        return self.add(other)

    def __sub__(self, other: 'FmpzPoly') -> 'FmpzPoly':
        return self.sub(other)

    def __neg__(self) -> 'FmpzPoly':
        return self.neg()

    def __mul__(self, other: 'FmpzPoly') -> 'FmpzPoly':
        return self.mul(other)

    def __floordiv__(self, other: 'FmpzPoly') -> 'FmpzPoly':
        return div(self, other)

    def __mod__(self, other: 'FmpzPoly') -> 'FmpzPoly':
        return rem(self, other)

    def __divmod__(self, other: 'FmpzPoly') -> Tuple['FmpzPoly', 'FmpzPoly']:
        return divrem(self, other)

# =============================================================================
# Division mit Rest

def _divrem_with(kernel, A: FmpzPoly, B: FmpzPoly) -> Tuple[FmpzPoly, FmpzPoly]:
    """
    Gemeinsamer Rahmen für die Divisionsvarianten: prüft den Divisor, behandelt
    lenA < lenB und normalisiert das Ergebnis. Q und R werden immer frisch
    angelegt, A und B gehen nur read-only in den Kern.
    """
    lenA, lenB = len(A), len(B)
    if lenB == 0:
        raise ZeroDivisionError("Division by zero polynomial")
    if lenA < lenB:
        return FmpzPoly.zero(), FmpzPoly(A.coeffs)

    Q = vec_init(lenA - lenB + 1)
    R = vec_init(lenA)
    kernel(Q, R, Window(A.coeffs, readonly=True), Window(B.coeffs, readonly=True))
    return FmpzPoly(Q.to_list()), FmpzPoly(R.to_list())

def divrem_divconquer(A: FmpzPoly, B: FmpzPoly) -> Tuple[FmpzPoly, FmpzPoly]:
    """Division mit Rest per Divide and Conquer: A = Q*B + R."""
    return _divrem_with(divconquer._divrem_divconquer, A, B)

def divrem_basecase(A: FmpzPoly, B: FmpzPoly) -> Tuple[FmpzPoly, FmpzPoly]:
    """Division mit Rest per Schulmethode: A = Q*B + R."""
    return _divrem_with(divconquer._divrem_basecase, A, B)

def divrem(A: FmpzPoly, B: FmpzPoly) -> Tuple[FmpzPoly, FmpzPoly]:
    """
    Wählt anhand der Divisorlänge zwischen Schulmethode und Divide and Conquer,
    mit derselben Grenze wie der balancierte Teiler in divconquer.
    """
    if len(B) <= divconquer.DIVREM_DIVCONQUER_CUTOFF:
        return divrem_basecase(A, B)
    return divrem_divconquer(A, B)

def div(A: FmpzPoly, B: FmpzPoly) -> FmpzPoly:
    return divrem(A, B)[0]

def rem(A: FmpzPoly, B: FmpzPoly) -> FmpzPoly:
    return divrem(A, B)[1]

DIVREM_ALGORITHMS = {
    "divconquer": divrem_divconquer,
    "basecase": divrem_basecase,
    "auto": divrem,
}

# =============================================================================
# Funktionsaufrufe

def zpoly_add(arguments: dict) -> dict:
    """Addiert zwei Polynome."""
    A = FmpzPoly.from_json(arguments["A"], "A")
    B = FmpzPoly.from_json(arguments["B"], "B")
    return {"S": (A + B).to_json()}

def zpoly_sub(arguments: dict) -> dict:
    """Subtrahiert B von A."""
    A = FmpzPoly.from_json(arguments["A"], "A")
    B = FmpzPoly.from_json(arguments["B"], "B")
    return {"D": (A - B).to_json()}

def zpoly_mul(arguments: dict) -> dict:
    """Multipliziert zwei Polynome."""
    A = FmpzPoly.from_json(arguments["A"], "A")
    B = FmpzPoly.from_json(arguments["B"], "B")
    return {"P": (A * B).to_json()}

def zpoly_divrem(arguments: dict) -> dict:
    """
    Berechnet Quotient und Rest. Optional "algorithm": divconquer (Standard), basecase oder auto.
    """
    A = FmpzPoly.from_json(arguments["A"], "A")
    B = FmpzPoly.from_json(arguments["B"], "B")
    algorithm = str(arguments.get("algorithm", "divconquer")).strip().lower()
    if algorithm not in DIVREM_ALGORITHMS:
        raise ValueError(f"Invalid algorithm {algorithm}")
    Q, R = DIVREM_ALGORITHMS[algorithm](A, B)
    return {"Q": Q.to_json(), "R": R.to_json()}

def zpoly_div(arguments: dict) -> dict:
    A = FmpzPoly.from_json(arguments["A"], "A")
    B = FmpzPoly.from_json(arguments["B"], "B")
    return {"Q": div(A, B).to_json()}

def zpoly_rem(arguments: dict) -> dict:
    A = FmpzPoly.from_json(arguments["A"], "A")
    B = FmpzPoly.from_json(arguments["B"], "B")
    return {"R": rem(A, B).to_json()}
