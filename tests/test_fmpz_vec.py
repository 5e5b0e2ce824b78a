import pytest
from gmpy2 import mpz

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


def test_window_shares_backing_list():
    w = Window.of([1, 2, 3, 4, 5])
    sub = w.window(1, 3)
    sub[0] = mpz(20)
    assert w.to_list() == [1, 20, 3, 4, 5]
    assert sub.to_list() == [20, 3, 4]
    assert len(sub) == 3


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_window_bounds_checked(index):
    w = Window.of([1, 2, 3, 4, 5]).window(1, 3)
    with pytest.raises(IndexError):
        w[index]
    with pytest.raises(IndexError):
        w[index] = mpz(0)


def test_subwindow_must_fit():
    w = Window.of([1, 2, 3])
    with pytest.raises(IndexError):
        w.window(2, 2)
    assert len(w.window(3, 0)) == 0


def test_readonly_window_rejects_writes():
    w = Window.of([1, 2, 3], readonly=True)
    with pytest.raises(ValueError):
        w[0] = mpz(7)
    with pytest.raises(ValueError):
        w.window(1, 2)[0] = mpz(7)
    assert w.to_list() == [1, 2, 3]


def test_vec_ops():
    a = Window.of([1, 2, 3])
    b = Window.of([10, 20, 30])
    dst = vec_init(3)
    vec_add(dst, a, b)
    assert dst.to_list() == [11, 22, 33]
    vec_sub(dst, dst, a)
    assert dst.to_list() == [10, 20, 30]
    vec_copy(dst, a)
    assert dst.to_list() == [1, 2, 3]
    vec_zero(dst)
    assert dst.to_list() == [0, 0, 0]


def test_vec_length_mismatch():
    with pytest.raises(ValueError):
        vec_add(vec_init(2), Window.of([1, 2]), Window.of([1, 2, 3]))


def test_vec_copy_overlapping():
    w = Window.of([1, 2, 3, 4])
    vec_copy(w.window(1, 3), w.window(0, 3))
    assert w.to_list() == [1, 1, 2, 3]


def test_vec_clear_empties_window():
    w = vec_init(4)
    vec_clear(w)
    assert len(w) == 0
    with pytest.raises(IndexError):
        w[0]


def test_scratch_released_on_exception():
    held = []
    with pytest.raises(RuntimeError):
        with scratch(5) as buf:
            held.append(buf)
            assert len(buf) == 5
            raise RuntimeError("boom")
    assert len(held[0]) == 0
