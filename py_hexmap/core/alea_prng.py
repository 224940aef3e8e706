"""
Python implementation of the Alea PRNG used for all map generation randomness.

Based on Johannes Baagøe's Alea algorithm. Every generation stage draws from a
single instance so that a fixed seed reproduces the same map on any platform.
"""


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """
    Seedable Alea generator with the helpers the generator stages need.

    ``value()`` and ``range()`` follow the conventions of the level editor the
    generator was designed for: ``range(a, b)`` is exclusive of ``b`` and
    collapses to ``a`` when the interval is empty.
    """

    def __init__(self, seed):
        """Initialize with seed string or number."""
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash_n = 0xEFC8249D

        def mash(data):
            nonlocal mash_n
            data = str(data)
            for char in data:
                mash_n = mash_n + ord(char)
                h = 0.02519603282416938 * mash_n
                mash_n = _uint32(h)
                h -= mash_n
                h *= mash_n
                mash_n = _uint32(h)
                h -= mash_n
                mash_n += h * 0x100000000  # 2^32
            return _uint32(mash_n) * 2.3283064365386963e-10  # 2^-32

        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 -= mash(arg)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(arg)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(arg)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def value(self) -> float:
        """Alias of random(), used where a probability roll is made."""
        return self.random()

    def chance(self, probability: float) -> bool:
        """Roll once and report whether the roll fell below ``probability``."""
        return self.random() < probability

    def range(self, minimum: int, maximum: int) -> int:
        """Random integer in [minimum, maximum); returns minimum for empty ranges."""
        if maximum <= minimum:
            # An empty range still consumes one roll
            self.random()
            return minimum
        return minimum + int(self.random() * (maximum - minimum))

    def choice(self, seq):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]
