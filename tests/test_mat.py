import random

import pytest
from gmpy2 import mpq, mpz

from polyops import mat
from polyops.mat import PrimeField, RationalField


def random_triu(rng, ctx, n, unit=False):
    U = [[ctx.zero()] * n for _ in range(n)]
    for i in range(n):
        for j in range(i, n):
            U[i][j] = ctx(rng.randrange(-50, 50))
        while U[i][i] == 0:
            U[i][i] = ctx(rng.randrange(-50, 50))
        if unit:
            # garbage on the diagonal must be ignored
            U[i][i] = ctx(rng.randrange(2, 50))
    return U


def random_matrix(rng, ctx, r, c):
    return [[ctx(rng.randrange(-1000, 1000)) for _ in range(c)] for _ in range(r)]


def with_unit_diagonal(ctx, U):
    return [[ctx(1) if i == j else x for j, x in enumerate(row)] for i, row in enumerate(U)]


CONTEXTS = [RationalField(), PrimeField(7), PrimeField((1 << 61) - 1)]


@pytest.mark.parametrize("ctx", CONTEXTS)
@pytest.mark.parametrize("n,m", [(1, 1), (3, 2), (8, 8), (13, 5)])
@pytest.mark.parametrize("unit", [False, True])
def test_classical_and_recursive_agree(ctx, n, m, unit):
    rng = random.Random(n * 100 + m)
    U = random_triu(rng, ctx, n, unit)
    B = random_matrix(rng, ctx, n, m)

    X1 = mat.solve_triu_classical(U, B, unit, ctx)
    X2 = mat.solve_triu_recursive(U, B, unit, ctx)
    assert X1 == X2

    U_eff = with_unit_diagonal(ctx, U) if unit else U
    assert mat.mat_mul(ctx, U_eff, X1) == [[ctx(x) for x in row] for row in B]


@pytest.mark.parametrize("rows,cols,expected", [
    (3, 100, "classical"),
    (100, 3, "classical"),
    (63, 64, "classical"),
    (64, 64, "recursive"),
    (70, 80, "recursive"),
])
def test_selector_uses_cutoffs(monkeypatch, rows, cols, expected):
    used = []
    monkeypatch.setattr(mat, "solve_triu_classical", lambda U, B, unit, ctx: used.append("classical"))
    monkeypatch.setattr(mat, "solve_triu_recursive", lambda U, B, unit, ctx: used.append("recursive"))
    B = [[0] * cols for _ in range(rows)]
    mat.solve_triu(None, B, False, RationalField())
    assert used == [expected]


def test_recursive_path_through_selector(monkeypatch):
    monkeypatch.setattr(mat, "MAT_SOLVE_TRI_ROWS_CUTOFF", 2)
    monkeypatch.setattr(mat, "MAT_SOLVE_TRI_COLS_CUTOFF", 2)
    ctx = RationalField()
    rng = random.Random(5)
    U = random_triu(rng, ctx, 17)
    B = random_matrix(rng, ctx, 17, 4)
    X = mat.solve_triu(U, B, False, ctx)
    assert mat.mat_mul(ctx, U, X) == B
    assert X == mat.solve_triu_classical(U, B, False, ctx)


def test_rational_solution_is_exact():
    ctx = RationalField()
    X = mat.solve_triu_classical([[ctx(3)]], [[ctx(1)]], False, ctx)
    assert X == [[mpq(1, 3)]]


def test_singular_matrix():
    ctx = RationalField()
    with pytest.raises(ZeroDivisionError):
        mat.solve_triu_classical([[ctx(1), ctx(2)], [ctx(0), ctx(0)]], [[ctx(1)], [ctx(1)]], False, ctx)
    with pytest.raises(ZeroDivisionError):
        mat.solve_triu_classical([[mpz(7)]], [[mpz(1)]], False, PrimeField(7))


def test_shape_mismatch():
    ctx = RationalField()
    with pytest.raises(ValueError):
        mat.solve_triu_classical([[ctx(1), ctx(2)]], [[ctx(1)]], False, ctx)
    with pytest.raises(ValueError):
        mat.solve_triu_classical([[ctx(1)]], [[ctx(1)], [ctx(2)]], False, ctx)


def test_prime_field_requires_prime():
    with pytest.raises(ValueError):
        PrimeField(15)


def test_mat_solve_triu_action():
    reply = mat.mat_solve_triu({"U": [[2, "1/3"], [0, 4]], "B": [[3], [8]]})
    # X2 = 2, X1 = (3 - 2/3) / 2 = 7/6
    assert reply == {"X": [["7/6"], [2]]}


def test_mat_solve_triu_action_rejects_lower_entries():
    with pytest.raises(ValueError):
        mat.mat_solve_triu({"U": [[1, 0], [5, 1]], "B": [[1], [1]]})


@pytest.mark.parametrize("unit", ["false", 0, 1, None])
def test_mat_solve_triu_action_rejects_non_bool_unit(unit):
    with pytest.raises(ValueError, match="Invalid value for unit"):
        mat.mat_solve_triu({"U": [[2, 0], [0, 4]], "B": [[2], [4]], "unit": unit})


def test_mat_solve_triu_action_unit_flag():
    arguments = {"U": [[2, 0], [0, 4]], "B": [[2], [4]]}
    assert mat.mat_solve_triu({**arguments, "unit": False}) == {"X": [[1], [1]]}
    assert mat.mat_solve_triu({**arguments, "unit": True}) == {"X": [[2], [4]]}
