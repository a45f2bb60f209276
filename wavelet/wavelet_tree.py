import logging

import numpy as np

from wavelet.bitvector import RoutingBitVector
from wavelet.errors import DomainViolation, EmptySequence, InvalidRange, OutOfRange
from utils.utils import value_bounds


class WaveletNode:
    """One node of the tree, covering the inclusive value range [low, high].

    A node over a single value is a leaf. A node whose local sequence is
    empty is terminal and owns nothing. Every other node bisects its range
    at ``mid`` and routes each element left (value <= mid) or right.
    """

    def __init__(self, values, low, high):
        self.low = low
        self.high = high
        self.n = len(values)
        self.bits = None
        self.left = None
        self.right = None

        if self.n == 0 or low == high:
            return

        mid = self.mid
        routed_right = values > mid
        self.bits = RoutingBitVector(routed_right)
        # boolean masks keep the original relative order on both sides
        self.left = WaveletNode(values[~routed_right], low, mid)
        self.right = WaveletNode(values[routed_right], mid + 1, high)

    @property
    def mid(self):
        return (self.low + self.high) // 2

    @property
    def is_leaf(self):
        return self.low == self.high

    def children(self):
        if self.left is None:
            return ()
        return (self.left, self.right)

    def access(self, index):
        if self.is_leaf:
            return self.low

        bit = self.bits[index]
        child_index = self.bits.rank_bit(bit, index + 1) - 1
        if bit:
            return self.right.access(child_index)
        return self.left.access(child_index)

    def rank_occurrences(self, i, x):
        if i < 0 or x < self.low or x > self.high or self.n == 0:
            return 0

        if self.is_leaf:
            return min(i + 1, self.n)

        if x <= self.mid:
            new_i = self.bits.rank_bit(False, i + 1) - 1
            if new_i < 0:
                return 0
            return self.left.rank_occurrences(new_i, x)

        ones_before = self.bits.rank_bit(True, i + 1)
        return self.right.rank_occurrences(ones_before - 1, x)

    def quantile(self, l, r, k):
        if self.is_leaf:
            return self.low

        left_l = self.bits.rank_bit(False, l)
        left_r = self.bits.rank_bit(False, r + 1)
        in_left = left_r - left_l

        if k <= in_left:
            return self.left.quantile(left_l, left_r - 1, k)
        return self.right.quantile(l - left_l, r - left_r, k - in_left)

    def prefix_sums(self):
        if self.bits is not None:
            return self.bits.rank_support.tolist()
        # a leaf routes everything to the same side
        return list(range(self.n + 1))

    def height(self):
        return 1 + max((child.height() for child in self.children()), default=-1)


class WaveletTree:
    """Static wavelet tree over a sequence of integers.

    Supports ``access`` (value at a position), ``rank_occurrences`` (how
    often a value occurs in a prefix) and ``quantile`` (k-th smallest value
    in a position range), each in O(log(high - low + 1)).

    Bounds default to the minimum and maximum of ``values``. The tree is
    never modified once built, so queries may be shared between threads.
    """

    def __init__(self, values, low=None, high=None):
        data = np.asarray(values)
        if data.size == 0:
            raise EmptySequence("cannot build a wavelet tree over an empty sequence")
        if data.ndim != 1:
            raise DomainViolation(f"expected a flat sequence, got shape {data.shape}")
        if data.dtype.kind not in "iu":
            raise DomainViolation(f"expected integer values, got dtype {data.dtype}")
        if data.dtype.kind == "u" and int(data.max()) > np.iinfo(np.int64).max:
            raise DomainViolation(f"value {int(data.max())} does not fit in int64")
        data = data.astype(np.int64, copy=False)

        if low is None or high is None:
            data_low, data_high = value_bounds(data)
            low = data_low if low is None else low
            high = data_high if high is None else high
        self.low, self.high = int(low), int(high)

        if self.low > self.high:
            raise DomainViolation(f"empty value range [{self.low}, {self.high}]")
        if int(data.min()) < self.low or int(data.max()) > self.high:
            raise DomainViolation(
                f"values span [{int(data.min())}, {int(data.max())}], "
                f"outside bounds [{self.low}, {self.high}]"
            )

        self.n = len(data)
        self.original_size = data.nbytes
        logging.debug(f"Building wavelet tree over {self.n} values in [{self.low}, {self.high}]")
        self.root = WaveletNode(data, self.low, self.high)

    def __len__(self):
        return self.n

    def access(self, index):
        """Return the value originally stored at ``index``."""
        if index < 0 or index >= self.n:
            raise OutOfRange(f"index {index} outside [0, {self.n - 1}]")
        return self.root.access(index)

    def rank_occurrences(self, i, x):
        """Count occurrences of ``x`` among positions ``0..i`` inclusive.

        Never raises: a negative ``i`` or an ``x`` outside the bounds counts
        as zero, and an ``i`` past the end counts the whole sequence.
        """
        return self.root.rank_occurrences(min(i, self.n - 1), x)

    def quantile(self, l, r, k):
        """Return the ``k``-th smallest (1-indexed) value in positions [l, r]."""
        if l > r or k < 1 or k > (r - l + 1):
            raise InvalidRange(f"invalid range [{l}, {r}] or k={k}")
        if l < 0 or r >= self.n:
            raise OutOfRange(f"range [{l}, {r}] outside [0, {self.n - 1}]")
        return self.root.quantile(l, r, k)

    def iter_nodes(self):
        """Yield every node in pre-order (node, then left, then right)."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def render(self, prefix=""):
        lines = []
        self._render(self.root, prefix, lines)
        return lines

    def _render(self, node, prefix, lines):
        lines.append(f"{prefix}[{node.low}-{node.high}] {node.prefix_sums()}")
        for marker, child in zip(("  L-", "  R-"), node.children()):
            self._render(child, prefix + marker, lines)

    def print_tree(self, prefix=""):
        for line in self.render(prefix):
            print(line)

    def get_size_metrics(self):
        node_count = 0
        leaf_count = 0
        bit_count = 0
        index_size = 0
        for node in self.iter_nodes():
            node_count += 1
            if node.is_leaf:
                leaf_count += 1
            if node.bits is not None:
                bit_count += len(node.bits)
                index_size += node.bits.nbytes()

        return {
            'length': self.n,
            'node_count': node_count,
            'leaf_count': leaf_count,
            'height': self.root.height(),
            'bit_count': bit_count,
            'original_size': self.original_size,
            'index_size': index_size,
            'size_ratio': index_size / self.original_size,
        }
