import numpy as np

from wavelet.errors import OutOfRange


class RoutingBitVector:
    """Routing bits of one wavelet node plus a dense prefix count of zeros.

    Bit ``False`` sends an element to the left child, ``True`` to the right.
    ``rank_support[j]`` holds the number of ``False`` bits among the first
    ``j`` bits, so either bit value can be ranked in O(1).
    """

    def __init__(self, bitmap):
        self.bit_vector = np.asarray(bitmap, dtype=np.uint8)
        self.n = len(self.bit_vector)
        self.rank_support = np.zeros(self.n + 1, dtype=np.int64)
        np.cumsum(1 - self.bit_vector.astype(np.int64), out=self.rank_support[1:])

    def __len__(self):
        return self.n

    def __getitem__(self, i):
        return bool(self.bit_vector[i])

    def rank_bit(self, bit, pos):
        """Number of positions among the first ``pos`` whose bit equals ``bit``."""
        if pos < 0 or pos > self.n:
            raise OutOfRange(f"position {pos} outside [0, {self.n}]")
        zeros = int(self.rank_support[pos])
        return pos - zeros if bit else zeros

    def nbytes(self):
        return self.bit_vector.nbytes + self.rank_support.nbytes
