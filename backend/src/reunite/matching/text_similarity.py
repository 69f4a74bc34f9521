"""Text similarity: TF-IDF cosine over descriptions and fuzzy name matching.

TF-IDF is computed over the two-document corpus {text1, text2} with smoothed
IDF `ln((N+1)/(df+1)) + 1`, which is scikit-learn's `smooth_idf=True`
formula. scikit-learn uses raw counts rather than count/len for TF; the
per-document scale factor cancels out in the cosine.
"""

from typing import List, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from .attributes import expand_with_synonyms, sanitize_text
from .utils import clamp, round_half_up

MAX_TFIDF_SCORE = 25
MAX_FUZZY_SCORE = 15
MIN_TOKEN_LENGTH = 3


def tokenize(text: str) -> List[str]:
    """Sanitize and split, keeping tokens longer than two characters."""
    return [word for word in sanitize_text(text).split(" ") if len(word) >= MIN_TOKEN_LENGTH]


def text_cosine_similarity(text1: str, text2: str) -> float:
    """Synonym-expanded TF-IDF cosine similarity of two texts.

    Returns:
        Similarity in [0, 1]; 0 when either side has no usable tokens
    """
    doc1 = tokenize(expand_with_synonyms(text1))
    doc2 = tokenize(expand_with_synonyms(text2))

    if not doc1 or not doc2:
        return 0.0

    # Documents are already tokenized; the callable analyzer passes them through
    vectorizer = TfidfVectorizer(analyzer=lambda doc: doc, smooth_idf=True, norm="l2")
    matrix = vectorizer.fit_transform([doc1, doc2])
    similarity = float(cosine_similarity(matrix[0], matrix[1])[0][0])

    return clamp(similarity, 0.0, 1.0)


def tfidf_similarity(text1: str, text2: str) -> int:
    """TF-IDF similarity of two descriptions scaled to the 0-25 weight."""
    return min(MAX_TFIDF_SCORE, round_half_up(text_cosine_similarity(text1, text2) * MAX_TFIDF_SCORE))


def batch_tfidf_similarity(pairs: Sequence[Tuple[str, str]]) -> List[int]:
    return [tfidf_similarity(text1, text2) for text1, text2 in pairs]


def name_similarity(name1: str, name2: str) -> float:
    """Levenshtein similarity `1 - distance / max(len)` on lowercased names.

    Two empty names are identical (1.0).
    """
    name1 = (name1 or "").lower()
    name2 = (name2 or "").lower()
    max_length = max(len(name1), len(name2))

    if max_length == 0:
        return 1.0

    distance = Levenshtein.distance(name1, name2)
    return 1.0 - (distance / max_length)


def fuzzy_match(name1: str, name2: str) -> int:
    """Typo-tolerant name score (0-15)."""
    return min(MAX_FUZZY_SCORE, round_half_up(name_similarity(name1, name2) * MAX_FUZZY_SCORE))


def is_similar(name1: str, name2: str, threshold: float = 0.7) -> bool:
    return name_similarity(name1, name2) >= threshold


def find_best_match(target: str, candidates: Sequence[str]) -> Optional[Tuple[str, float]]:
    """Candidate with the highest name similarity to target.

    Ties keep the earliest candidate.

    Returns:
        (candidate, similarity) or None for an empty candidate list
    """
    if not candidates:
        return None

    best_match = candidates[0]
    best_score = name_similarity(target, best_match)

    for candidate in candidates[1:]:
        score = name_similarity(target, candidate)
        if score > best_score:
            best_match = candidate
            best_score = score

    return best_match, best_score
