"""String similarity for group search."""

from collections import Counter


def _bigrams(text: str) -> Counter[str]:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def compare_two_strings(first: str, second: str) -> float:
    """Sørensen-Dice coefficient over character bigrams.

    Whitespace is ignored. Unlike the string-similarity npm package this is
    modelled on, comparison is case-insensitive, so "foo bar" scores 1.0
    against "Foo Bar". Returns a value in [0.0, 1.0]; identical strings
    score 1.0 and the result is symmetric.
    """
    a = "".join(first.split()).casefold()
    b = "".join(second.split()).casefold()

    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    overlap = sum((_bigrams(a) & _bigrams(b)).values())
    return 2.0 * overlap / (len(a) + len(b) - 2)
