from gmpy2 import f_div

from polyops.fmpz import ZERO
from polyops.fmpz_vec import (
    Window,
    scratch,
    vec_init,
    vec_clear,
    vec_copy,
    vec_add,
    vec_sub,
    vec_zero,
)
from polyops.poly_mul import _poly_mul

# =============================================================================
# Konstanten

# Bis zu dieser Divisorlänge wird eine balancierte Division per Schulmethode gelöst
DIVREM_DIVCONQUER_CUTOFF = 16

# =============================================================================
# Schulmethode

def _divrem_basecase(Q: Window, R: Window, A: Window, B: Window) -> None:
    """
    Klassische Polynomdivision A = Q*B + R über Z.

    Für jede Stelle wird die Quotientenziffer als floor(R[i] / lead(B)) gewählt,
    sofern |R[i]| >= |lead(B)|, sonst 0. Damit gilt A = Q*B + R immer exakt;
    deg(R) < deg(B) ist garantiert, wenn lead(B) = ±1 ist.
    Q hat Länge lenA - lenB + 1, R hat Länge lenA. R darf A nicht überlappen.
    """
    lenA, lenB = len(A), len(B)
    lead = B[lenB - 1]
    b = B.to_list()
    rem = A.to_list()

    for iQ in range(lenA - lenB, -1, -1):
        iR = iQ + lenB - 1
        if abs(rem[iR]) < abs(lead):
            Q[iQ] = ZERO
            continue
        q = f_div(rem[iR], lead)
        Q[iQ] = q
        for j, bj in enumerate(b):
            rem[iQ + j] -= q * bj

    for i, c in enumerate(rem):
        R[i] = c

# =============================================================================
# Balancierte Division

def _divrem_divconquer_recursive(Q: Window, BQ: Window, A: Window, B: Window) -> None:
    """
    Balancierte Division: A hat Länge 2n - 1, B hat Länge n.
    Schreibt den Quotienten Q (Länge n) und das Teilprodukt BQ = B*Q (Länge 2n - 1).
    """
    lenB = len(B)

    if lenB <= DIVREM_DIVCONQUER_CUTOFF or lenB < 2:
        # BQ nimmt zunächst den Rest auf, danach BQ = A - R
        _divrem_basecase(Q, BQ, A, B)
        vec_sub(BQ, A, BQ)
        return

    n2 = lenB // 2
    n1 = lenB - n2

    d1 = B.window(n2, n1)
    d2 = B.window(0, n2)
    d3 = B.window(n1, n2)
    d4 = B.window(0, n1)

    q1 = Q.window(n2, n1)
    q2 = Q.window(0, n2)

    # q1 = p1 div d1, eine (2 n1 - 1) durch n1 Division; d1q1 landet oben in BQ
    p1 = A.window(2 * n2, 2 * n1 - 1)
    d1q1 = BQ.window(2 * n2, 2 * n1 - 1)
    _divrem_divconquer_recursive(q1, d1q1, p1, d1)

    # BQ[n2:] = (d1q1 x^n2 + d2q1), also B*q1 um n2 verschoben
    with scratch(lenB - 1) as d2q1:
        _poly_mul(d2q1, q1, d2)
        vec_copy(BQ.window(n2, n2), d2q1.window(0, n2))
        top = BQ.window(2 * n2, n1 - 1)
        vec_add(top, top, d2q1.window(n2, n1 - 1))

    # Die obersten 2 n2 - 1 relevanten Koeffizienten von A - B*q1*x^n2 bilden p2
    with scratch(2 * n2 - 1) as p2, scratch(2 * n2 - 1) as d3q2, scratch(lenB - 1) as d4q2:
        vec_sub(p2, A.window(n1, 2 * n2 - 1), BQ.window(n1, 2 * n2 - 1))

        # q2 = p2 div d3, eine (2 n2 - 1) durch n2 Division
        _divrem_divconquer_recursive(q2, d3q2, p2, d3)
        _poly_mul(d4q2, d4, q2)

        # BQ += d3q2 x^n1 + d4q2
        vec_zero(BQ.window(0, n2))
        low = BQ.window(0, lenB - 1)
        vec_add(low, low, d4q2)
        mid = BQ.window(n1, 2 * n2 - 1)
        vec_add(mid, mid, d3q2)

# =============================================================================
# Beliebiges Längenverhältnis

def _divrem_deficient(Q: Window, R: Window, A: Window, B: Window) -> None:
    """
    lenA < 2 lenB - 1: Rückführung auf eine (2 n1 - 1) durch n1 Division mit dem
    oberen Teil d1 von B, danach Korrektur mit dem unteren Teil d2.
    """
    lenA, lenB = len(A), len(B)
    n1 = lenA - lenB + 1
    n2 = lenB - n1

    p1 = A.window(n2, lenA - n2)
    d1 = B.window(n2, n1)
    d2 = B.window(0, n2)

    # R ist disjunkt zu A und B und dient vorübergehend als Puffer für d1q1
    d1q1 = R.window(n2, lenA - n2)
    _divrem_divconquer_recursive(Q, d1q1, p1, d1)

    with scratch(lenB - 1) as d2q1:
        if n1 >= n2:
            _poly_mul(d2q1, Q, d2)
        else:
            _poly_mul(d2q1, d2, Q)

        # R = d1q1 x^n2 + d2q1, danach R = A - R
        vec_copy(R.window(0, n2), d2q1.window(0, n2))
        top = R.window(n2, n1 - 1)
        vec_add(top, top, d2q1.window(n2, n1 - 1))

    vec_sub(R, A, R)

def _divrem_divconquer(Q: Window, R: Window, A: Window, B: Window) -> None:
    """
    Division mit Rest A = Q*B + R für beliebige lenA >= lenB >= 1, lead(B) != 0.

    Q hat Länge lenA - lenB + 1, R hat Länge lenA (obere Koeffizienten können
    Null sein). A und B werden nie beschrieben, Q und R müssen disjunkt zu A und
    B sein. Ist lenA > 2 lenB - 1, wird jeweils der oberste balancierte Block
    abgespalten und mit dem um lenB kürzeren Rest weitergerechnet.
    """
    lenA, lenB = len(A), len(B)
    prev = held = None

    try:
        while lenA > 2 * lenB - 1:
            shift = lenA - 2 * lenB + 1

            # dq1 = d1q1 x^shift, der untere Teil wird zum neuen Dividenden;
            # A kann noch im Puffer prev liegen
            prev, held = held, vec_init(lenA)
            dq1 = held
            _divrem_divconquer_recursive(Q.window(shift, lenB), dq1.window(shift, 2 * lenB - 1),
                                         A.window(shift, 2 * lenB - 1), B)

            # Die oberen lenB Koeffizienten von A - dq1 gehören direkt zum Rest
            vec_copy(dq1.window(0, shift), A.window(0, shift))
            mid = dq1.window(shift, lenB - 1)
            vec_sub(mid, A.window(shift, lenB - 1), mid)
            vec_sub(R.window(lenA - lenB, lenB), A.window(lenA - lenB, lenB), dq1.window(lenA - lenB, lenB))

            if prev is not None:
                vec_clear(prev)

            # Q = q1 x^shift + q2, q2 hat Länge shift
            Q = Q.window(0, shift)
            R = R.window(0, lenA - lenB)
            A = dq1.window(0, lenA - lenB)
            lenA -= lenB

        if lenA < 2 * lenB - 1:
            _divrem_deficient(Q, R, A, B)
        else:
            _divrem_divconquer_recursive(Q, R, A, B)
            vec_sub(R, A, R)
    finally:
        for buf in (prev, held):
            if buf is not None:
                vec_clear(buf)
