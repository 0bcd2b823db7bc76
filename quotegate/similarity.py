"""Edit-distance similarity between normalized statements."""


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit cost for insert, delete and substitute."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Return ``1 - distance / max(len)`` in [0, 1]; two empty strings score 1.0.

    O(len(a) * len(b)); keep inputs and candidate pools bounded.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - edit_distance(a, b) / longest


def length_bound(len_a: int, len_b: int) -> float:
    """Upper bound on :func:`similarity` from the lengths alone."""
    longest = max(len_a, len_b)
    if longest == 0:
        return 1.0
    return 1 - abs(len_a - len_b) / longest
