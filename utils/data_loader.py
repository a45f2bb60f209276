import gzip

from utils.utils import parse_values

def load_values(path, size_limit=None):
    opener = gzip.open if str(path).endswith('.gz') else open
    with opener(path, 'rt', encoding='latin-1') as f:
        values = parse_values(f.read())
    if size_limit:
        return values[:size_limit]  # Keep at most `size_limit` values
    return values
