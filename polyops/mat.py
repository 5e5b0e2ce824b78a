from typing import List
from gmpy2 import mpz, mpq, invert, is_prime

from polyops.fmpz import parse_to_int, parse_to_rational, rational_to_json, to_32bit_or_hex

# =============================================================================
# Konstanten

# Unterhalb einer dieser Größen von B wird klassisch rückwärts eingesetzt
MAT_SOLVE_TRI_ROWS_CUTOFF = 64
MAT_SOLVE_TRI_COLS_CUTOFF = 64

# =============================================================================
# Koeffizientenbereiche

class RationalField:
    """Der Körper Q, Elemente sind gmpy2.mpq."""

    def __call__(self, value) -> mpq:
        return mpq(value)

    def parse(self, value, name: str) -> mpq:
        return parse_to_rational(value, name)

    def to_json(self, x):
        return rational_to_json(x)

    def zero(self) -> mpq:
        return mpq(0)

    def inv(self, x) -> mpq:
        if x == 0:
            raise ZeroDivisionError("Matrix is singular")
        return 1 / mpq(x)

    def add(self, x, y):
        return x + y

    def sub(self, x, y):
        return x - y

    def mul(self, x, y):
        return x * y

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RationalField)

    def __repr__(self) -> str:
        return "RationalField()"

class PrimeField:
    """
    Der Primkörper GF(p), Elemente sind gmpy2.mpz im Bereich [0, p).
    """

    def __init__(self, p):
        p = mpz(p)
        if p < 2 or not is_prime(p):
            raise ValueError(f"p must be prime, got {int(p)}")
        self.p = p

    def __call__(self, value) -> mpz:
        return mpz(value) % self.p

    def parse(self, value, name: str) -> mpz:
        return parse_to_int(value, name) % self.p

    def to_json(self, x):
        return to_32bit_or_hex(x)

    def zero(self) -> mpz:
        return mpz(0)

    def inv(self, x) -> mpz:
        if x % self.p == 0:
            raise ZeroDivisionError("Matrix is singular")
        return invert(x, self.p)

    def add(self, x, y):
        return (x + y) % self.p

    def sub(self, x, y):
        return (x - y) % self.p

    def mul(self, x, y):
        return (x * y) % self.p

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PrimeField) and self.p == other.p

    def __repr__(self) -> str:
        return f"PrimeField({int(self.p)})"

# =============================================================================
# Matrix-Hilfsfunktionen (Matrizen als Zeilenlisten)

Matrix = List[list]

def mat_shape(M: Matrix):
    """
    Prüft, dass alle Zeilen gleich lang sind, und gibt (Zeilen, Spalten) zurück.
    """
    r = len(M)
    c = len(M[0]) if r else 0
    for row in M:
        if len(row) != c:
            raise ValueError("All matrix rows must have the same length")
    return r, c

def mat_submul(ctx, C: Matrix, A: Matrix, B: Matrix) -> Matrix:
    """Gibt C - A*B zurück."""
    out = []
    for i, row in enumerate(C):
        new_row = list(row)
        for k, a in enumerate(A[i]):
            if a == 0:
                continue
            b_row = B[k]
            for j in range(len(new_row)):
                new_row[j] = ctx.sub(new_row[j], ctx.mul(a, b_row[j]))
        out.append(new_row)
    return out

def mat_mul(ctx, A: Matrix, B: Matrix) -> Matrix:
    """Matrixprodukt A*B, B muss mindestens eine Zeile haben."""
    out = []
    for row in A:
        new_row = [ctx.zero()] * len(B[0])
        for k, a in enumerate(row):
            for j, b in enumerate(B[k]):
                new_row[j] = ctx.add(new_row[j], ctx.mul(a, b))
        out.append(new_row)
    return out

def _check_triu(U: Matrix, B: Matrix):
    n, m = mat_shape(U)
    if n != m:
        raise ValueError("U must be square")
    r, c = mat_shape(B)
    if r != n:
        raise ValueError(f"B must have {n} rows, got {r}")
    return n, c

# =============================================================================
# Obere Dreieckssysteme U X = B

def solve_triu_classical(U: Matrix, B: Matrix, unit: bool, ctx) -> Matrix:
    """
    Rückwärtseinsetzen, spaltenweise. Ist unit gesetzt, wird die Diagonale als 1 angenommen
    und nicht gelesen.
    """
    n, m = _check_triu(U, B)
    inv_diag = None if unit else [ctx.inv(U[i][i]) for i in range(n)]

    X = [[ctx.zero()] * m for _ in range(n)]
    for j in range(m):
        for i in range(n - 1, -1, -1):
            s = B[i][j]
            for k in range(i + 1, n):
                s = ctx.sub(s, ctx.mul(U[i][k], X[k][j]))
            X[i][j] = s if unit else ctx.mul(s, inv_diag[i])
    return X

def solve_triu_recursive(U: Matrix, B: Matrix, unit: bool, ctx) -> Matrix:
    """
    Blockweise Lösung mit U = [[A, T], [0, D]] und B = [B1; B2]:
    zuerst D X2 = B2, danach A X1 = B1 - T X2.
    """
    n, m = _check_triu(U, B)
    if n < 2 or m == 0:
        return solve_triu_classical(U, B, unit, ctx)

    r1 = n // 2
    A = [row[:r1] for row in U[:r1]]
    T = [row[r1:] for row in U[:r1]]
    D = [row[r1:] for row in U[r1:]]
    B1 = B[:r1]
    B2 = B[r1:]

    X2 = solve_triu(D, B2, unit, ctx)
    X1 = solve_triu(A, mat_submul(ctx, B1, T, X2), unit, ctx)
    return X1 + X2

def solve_triu(U: Matrix, B: Matrix, unit: bool, ctx) -> Matrix:
    """
    Löst U X = B für obere Dreiecksmatrizen U. Klassisch, falls B weniger Zeilen als
    MAT_SOLVE_TRI_ROWS_CUTOFF oder weniger Spalten als MAT_SOLVE_TRI_COLS_CUTOFF hat,
    sonst rekursiv.
    """
    if len(B) < MAT_SOLVE_TRI_ROWS_CUTOFF or (len(B[0]) if B else 0) < MAT_SOLVE_TRI_COLS_CUTOFF:
        return solve_triu_classical(U, B, unit, ctx)
    return solve_triu_recursive(U, B, unit, ctx)

# =============================================================================
# Funktionsaufrufe

def mat_solve_triu(arguments: dict) -> dict:
    """
    Löst U X = B. Mit "p" über GF(p), sonst über Q. "unit" nimmt eine Einheitsdiagonale an.
    """
    if "p" in arguments:
        ctx = PrimeField(parse_to_int(arguments["p"], "p"))
    else:
        ctx = RationalField()
    unit = arguments.get("unit", False)
    if not isinstance(unit, bool):
        raise ValueError(f"Invalid value for unit: {unit}")

    U = [[ctx.parse(v, f"U[{i}][{j}]") for j, v in enumerate(row)] for i, row in enumerate(arguments["U"])]
    B = [[ctx.parse(v, f"B[{i}][{j}]") for j, v in enumerate(row)] for i, row in enumerate(arguments["B"])]
    for i, row in enumerate(U):
        for j in range(min(i, len(row))):
            if row[j] != 0:
                raise ValueError(f"U is not upper triangular at ({i}, {j})")

    X = solve_triu(U, B, unit, ctx)
    return {"X": [[ctx.to_json(x) for x in row] for row in X]}
