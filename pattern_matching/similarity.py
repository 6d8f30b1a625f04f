"""
Edit-distance similarity used by the fuzzy matcher
"""


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Plain Levenshtein distance over code points

    Insertions, deletions and substitutions cost 1; a transposition
    counts as two substitutions.
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Two-row dynamic programming table
    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i]
        for j, c2 in enumerate(s2, start=1):
            cost = 0 if c1 == c2 else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current

    return previous[-1]


def calculate_similarity(s1: str, s2: str) -> float:
    """
    Similarity in [0, 1] derived from Levenshtein distance

    Lengths are counted in characters, not bytes. Two empty strings are
    identical (1.0); an empty and a non-empty string share nothing (0.0).
    """
    len1 = len(s1)
    len2 = len(s2)

    if len1 == 0 and len2 == 0:
        return 1.0
    if len1 == 0 or len2 == 0:
        return 0.0

    return 1.0 - levenshtein_distance(s1, s2) / max(len1, len2)
