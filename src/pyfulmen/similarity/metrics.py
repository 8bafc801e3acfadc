"""Edit-distance and similarity metrics.

All metrics operate on Python strings, so lengths and indices count Unicode code
points rather than bytes. Inputs are compared as-is; normalization is the caller's
job (see pyfulmen.similarity.normalize).

  Metric                  Edits counted
  --------------------------------------------------------------------
  levenshtein             insert, delete, substitute
  osa_distance            as above + adjacent transposition, each substring edited once
  damerau_distance        as above + unrestricted transpositions
  jaro_winkler            similarity in [0, 1] with a common-prefix bonus
  longest_common_substring  (length, end index in b)
"""


def levenshtein(a: str, b: str) -> int:
    """Wagner-Fischer edit distance using two rows.

    The inner loop runs over the shorter string.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    if len(b) > len(a):
        a, b = b, a

    previous = list(range(len(b) + 1))
    current = [0] * (len(b) + 1)

    for i, char_a in enumerate(a, start=1):
        current[0] = i
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous, current = current, previous

    return previous[len(b)]


def osa_distance(a: str, b: str) -> int:
    """Optimal string alignment distance.

    Three rows are kept: the row two iterations back is only read when the two
    characters around the current cell are a swapped pair.
    """
    len_a, len_b = len(a), len(b)
    if len_a == 0:
        return len_b
    if len_b == 0:
        return len_a

    two_back = [0] * (len_b + 1)
    previous = list(range(len_b + 1))
    current = [0] * (len_b + 1)

    for i in range(1, len_a + 1):
        current[0] = i
        char_a = a[i - 1]
        for j in range(1, len_b + 1):
            char_b = b[j - 1]
            cost = 0 if char_a == char_b else 1
            value = min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            if i > 1 and j > 1 and char_a == b[j - 2] and a[i - 2] == char_b:
                value = min(value, two_back[j - 2] + 1)
            current[j] = value
        two_back, previous, current = previous, current, two_back

    return previous[len_b]


def damerau_distance(a: str, b: str) -> int:
    """Unrestricted Damerau-Levenshtein distance (Lowrance-Wagner).

    Unlike OSA, a transposed pair may be edited again, so "CA" -> "ABC" costs 2.
    """
    len_a, len_b = len(a), len(b)
    if len_a == 0:
        return len_b
    if len_b == 0:
        return len_a

    infinity = len_a + len_b
    # Row/column 0 hold the sentinel, row/column 1 the empty-prefix distances.
    d = [[0] * (len_b + 2) for _ in range(len_a + 2)]
    d[0][0] = infinity
    for i in range(len_a + 1):
        d[i + 1][0] = infinity
        d[i + 1][1] = i
    for j in range(len_b + 1):
        d[0][j + 1] = infinity
        d[1][j + 1] = j

    last_row: dict[str, int] = {}
    for i in range(1, len_a + 1):
        char_a = a[i - 1]
        last_match_col = 0
        for j in range(1, len_b + 1):
            char_b = b[j - 1]
            i1 = last_row.get(char_b, 0)
            j1 = last_match_col
            if char_a == char_b:
                cost = 0
                last_match_col = j
            else:
                cost = 1
            d[i + 1][j + 1] = min(
                d[i][j] + cost,
                d[i + 1][j] + 1,
                d[i][j + 1] + 1,
                d[i1][j1] + (i - i1 - 1) + 1 + (j - j1 - 1),
            )
        last_row[char_a] = i

    return d[len_a + 1][len_b + 1]


def jaro(a: str, b: str) -> float:
    """Jaro similarity in [0, 1]."""
    len_a, len_b = len(a), len(b)
    if len_a == 0 and len_b == 0:
        return 1.0
    if len_a == 0 or len_b == 0:
        return 0.0

    window = max(max(len_a, len_b) // 2 - 1, 0)
    a_matched = [False] * len_a
    b_matched = [False] * len_b
    matches = 0

    for i, char_a in enumerate(a):
        lo = max(0, i - window)
        hi = min(i + window + 1, len_b)
        for j in range(lo, hi):
            if b_matched[j] or b[j] != char_a:
                continue
            a_matched[i] = b_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    half_transpositions = 0
    k = 0
    for i in range(len_a):
        if not a_matched[i]:
            continue
        while not b_matched[k]:
            k += 1
        if a[i] != b[k]:
            half_transpositions += 1
        k += 1

    transpositions = half_transpositions / 2
    return (matches / len_a + matches / len_b + (matches - transpositions) / matches) / 3


# Winkler only boosts pairs that are already similar
WINKLER_BOOST_THRESHOLD = 0.7


def jaro_winkler(a: str, b: str, prefix_scale: float = 0.1, max_prefix: int = 4) -> float:
    """Jaro-Winkler similarity.

    Args:
        a: First string
        b: Second string
        prefix_scale: Weight of each shared prefix character
        max_prefix: Maximum shared prefix length that earns a bonus

    Returns:
        Similarity in [0, 1]
    """
    similarity = jaro(a, b)
    if similarity <= WINKLER_BOOST_THRESHOLD:
        return similarity

    prefix = 0
    for char_a, char_b in zip(a[:max_prefix], b[:max_prefix]):
        if char_a != char_b:
            break
        prefix += 1

    return min(similarity + prefix * prefix_scale * (1.0 - similarity), 1.0)


def longest_common_substring(a: str, b: str) -> tuple[int, int]:
    """Longest common substring by dynamic programming.

    Returns:
        ``(length, end)`` where ``b[end - length:end]`` is the first longest match in ``b``.
        ``(0, 0)`` when the strings share no character.
    """
    if not a or not b:
        return 0, 0

    best_length = 0
    best_end = 0
    previous = [0] * (len(b) + 1)
    for char_a in a:
        current = [0] * (len(b) + 1)
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current[j] = previous[j - 1] + 1
                if current[j] > best_length:
                    best_length = current[j]
                    best_end = j
        previous = current

    return best_length, best_end
