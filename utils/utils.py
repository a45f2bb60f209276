import time

import numpy as np

from wavelet.errors import EmptySequence


def time_function(func):
    """
    Decorator to measure the execution time of a function
    """
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        end_time = time.time()
        execution_time = end_time - start_time
        return result, execution_time
    return wrapper

def parse_values(line):
    """Parse a whitespace-separated line of integers."""
    tokens = line.split()
    if not tokens:
        raise EmptySequence("value list cannot be empty")
    return [int(token) for token in tokens]

def value_bounds(values):
    """Return (min, max) of a non-empty sequence as plain ints."""
    data = np.asarray(values)
    if data.size == 0:
        raise EmptySequence("cannot take the bounds of an empty sequence")
    return int(data.min()), int(data.max())
