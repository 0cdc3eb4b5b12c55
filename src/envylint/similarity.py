"""
Cosine similarity between sparse weight vectors.

envylint/src/envylint/similarity.py
"""

import math
from typing import Mapping

__all__ = ["cosine_similarity"]


def cosine_similarity(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    """
    Cosine of the angle between two sparse vectors.

    Keys missing from one vector count as 0. If either vector has zero
    magnitude the similarity is 0 rather than a division error.
    """
    dot = 0.0
    magnitude_a = 0.0
    magnitude_b = 0.0
    for token in a.keys() | b.keys():
        weight_a = a.get(token, 0.0)
        weight_b = b.get(token, 0.0)
        dot += weight_a * weight_b
        magnitude_a += weight_a * weight_a
        magnitude_b += weight_b * weight_b

    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0
    # Rounding can push a self-comparison a hair above 1.
    return min(1.0, dot / (math.sqrt(magnitude_a) * math.sqrt(magnitude_b)))
