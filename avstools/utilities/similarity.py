"""
Fuzzy comparison of model-generated strategies.

Two calls to the same model rarely return byte-identical text, so validators
compare strategies by normalized Levenshtein similarity instead of equality.
"""

def normalize_text(text: str) -> str:
    """
    Lowercase a string and reduce it to letters and digits separated by single spaces.

    Every run of whitespace or punctuation collapses into one space, and the
    result is trimmed, so "Hello,  World!" and "hello world" normalize the same.
    """
    words = []
    current = []
    for char in text.lower():
        if char.isalpha() or char.isdigit():
            current.append(char)
        elif current:
            words.append(''.join(current))
            current = []
    if current:
        words.append(''.join(current))
    return ' '.join(words)

def levenshtein_distance(s1: str, s2: str) -> int:
    """Classic edit distance over a (len(s1)+1) x (len(s2)+1) table with unit costs"""
    rows, cols = len(s1) + 1, len(s2) + 1
    matrix = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,         # deletion
                matrix[i][j - 1] + 1,         # insertion
                matrix[i - 1][j - 1] + cost,  # substitution
            )

    return matrix[rows - 1][cols - 1]

def calculate_string_similarity(str1: str, str2: str) -> float:
    """
    Similarity between two strings, from 0.0 (completely different) to 1.0 (identical).

    Args:
        str1: First string
        str2: Second string

    Returns:
        float: 1 - levenshtein_distance / max length, computed on the normalized strings.
            Two empty strings are identical (1.0); one empty string scores 0.0.
    """
    str1 = normalize_text(str1)
    str2 = normalize_text(str2)

    if not str1 and not str2:
        return 1.0
    if not str1 or not str2:
        return 0.0

    distance = levenshtein_distance(str1, str2)
    return 1.0 - distance / max(len(str1), len(str2))

def compare_responses(response1: str, response2: str) -> float:
    """Compare two model responses and return their similarity score"""
    return calculate_string_similarity(response1, response2)
