from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional
from gmpy2 import mpz

from polyops.fmpz import ZERO

# =============================================================================
# Koeffizientenfenster

class Window:
    """
    Sicht auf einen zusammenhängenden Abschnitt einer Koeffizientenliste.

    data ist die gemeinsame Liste, offset der Startindex darin, length die
    logische Länge. Teilfenster teilen sich data mit dem Elternfenster.
    Jeder Zugriff wird gegen length geprüft, ein read-only Fenster lässt sich
    nicht beschreiben (auch nicht über seine Teilfenster).
    """
    __slots__ = ('data', 'offset', 'length', 'readonly')

    def __init__(self, data: List[mpz], offset: int = 0, length: Optional[int] = None, readonly: bool = False):
        if length is None:
            length = len(data) - offset
        if offset < 0 or length < 0 or offset + length > len(data):
            raise IndexError(f"Window [{offset}, {offset + length}) exceeds buffer of length {len(data)}")
        self.data = data
        self.offset = offset
        self.length = length
        self.readonly = readonly

    @classmethod
    def of(cls, coeffs: Iterable, readonly: bool = False) -> 'Window':
        """Legt ein Fenster über eine frische Kopie von coeffs an (Hilfsmittel für Tests)."""
        return cls([mpz(c) for c in coeffs], readonly=readonly)

    def window(self, start: int, length: int) -> 'Window':
        """Gibt das Teilfenster [start, start + length) zurück."""
        if start < 0 or length < 0 or start + length > self.length:
            raise IndexError(f"Sub-window [{start}, {start + length}) exceeds window of length {self.length}")
        return Window(self.data, self.offset + start, length, self.readonly)

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, i: int) -> mpz:
        if not 0 <= i < self.length:
            raise IndexError(f"Index {i} out of window of length {self.length}")
        return self.data[self.offset + i]

    def __setitem__(self, i: int, value) -> None:
        if self.readonly:
            raise ValueError("Window is read-only")
        if not 0 <= i < self.length:
            raise IndexError(f"Index {i} out of window of length {self.length}")
        self.data[self.offset + i] = value

    def __iter__(self) -> Iterator[mpz]:
        for i in range(self.offset, self.offset + self.length):
            yield self.data[i]

    def to_list(self) -> List[mpz]:
        return self.data[self.offset:self.offset + self.length]

    def __repr__(self) -> str:
        return f"Window({[int(c) for c in self]!r})"

# =============================================================================
# Puffer-Arena

def vec_init(n: int) -> Window:
    """
    Reserviert einen mit Nullen gefüllten Puffer der Länge n.
    Ein MemoryError wird nicht abgefangen.
    """
    return Window([ZERO] * n)

def vec_clear(vec: Window) -> None:
    """
    Gibt einen mit vec_init angelegten Puffer frei. Das Fenster ist danach leer.
    """
    vec.data = []
    vec.offset = 0
    vec.length = 0

@contextmanager
def scratch(n: int):
    """
    Temporärer Puffer der Länge n, der beim Verlassen des Blocks
    (auch bei Ausnahmen) freigegeben wird.
    """
    vec = vec_init(n)
    try:
        yield vec
    finally:
        vec_clear(vec)

def _check_lengths(dst: Window, *srcs: Window) -> int:
    n = len(dst)
    for src in srcs:
        if len(src) != n:
            raise ValueError(f"Window lengths differ: {n} != {len(src)}")
    return n

def vec_zero(dst: Window) -> None:
    for i in range(len(dst)):
        dst[i] = ZERO

def vec_copy(dst: Window, src: Window) -> None:
    """Kopiert src nach dst, beide gleich lang."""
    n = _check_lengths(dst, src)
    # Zwischenliste, damit sich überlappende Fenster nicht gegenseitig überschreiben
    values = src.to_list()
    for i in range(n):
        dst[i] = values[i]

def vec_add(dst: Window, a: Window, b: Window) -> None:
    """
    dst = a + b koeffizientenweise. dst darf identisch mit a oder b sein.
    """
    n = _check_lengths(dst, a, b)
    for i in range(n):
        dst[i] = a[i] + b[i]

def vec_sub(dst: Window, a: Window, b: Window) -> None:
    """
    dst = a - b koeffizientenweise. dst darf identisch mit a oder b sein.
    """
    n = _check_lengths(dst, a, b)
    for i in range(n):
        dst[i] = a[i] - b[i]
