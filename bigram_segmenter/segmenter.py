import os
from typing import List, NamedTuple, Tuple

from .probability import ProbabilityDistribution

DEFAULT_MAX_TOKEN_LENGTH = 20

# Previous token for the first word of a line. Angle brackets keep it
# out of any vocabulary built from whitespace-split text.
SENTENCE_START = "<S>"


class ProbTuple(NamedTuple):
    """A candidate segmentation: cumulative log2 probability and its tokens."""
    log_prob: float
    tokens: Tuple[str, ...]

    def combine(self, log_prob, token):
        """Prepend a token scored log_prob to this (tail) segmentation."""
        return ProbTuple(log_prob + self.log_prob, (token,) + self.tokens)


def max_prob_tuple(candidates):
    """
    Return the candidate with the highest log probability.
    Ties go to the lexicographically smaller space-joined token string.
    """
    if not candidates:
        raise ValueError("No candidates to choose from.")

    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.log_prob > best.log_prob:
            best = candidate
        elif candidate.log_prob == best.log_prob and " ".join(candidate.tokens) < " ".join(best.tokens):
            best = candidate
    return best


class BigramSegmenter:
    def __init__(self, unigram_total, unigram_frequencies, bigram_total, bigram_frequencies,
                 max_token_length=DEFAULT_MAX_TOKEN_LENGTH):
        """
        Initialize the segmenter by loading unigram and bigram tables.
        Missing files leave the corresponding table empty.
        """
        self.max_token_length = max_token_length
        self.unigrams = ProbabilityDistribution(unigram_total, unigram_frequencies)
        self.bigrams = ProbabilityDistribution(bigram_total, bigram_frequencies)

    @classmethod
    def from_model(cls, model_path, model_name, max_token_length=DEFAULT_MAX_TOKEN_LENGTH):
        """
        Load a model directory laid out as:

            model_path/model_name/total.tsv        unigram total count
            model_path/model_name/frequencies.tsv  unigram frequencies
            model_path/model_name/2_total.tsv      bigram total count
            model_path/model_name/2_frequencies.tsv  bigram frequencies, e.g. "of the 4090128330"
        """
        model_dir = os.path.join(model_path, model_name)
        return cls(
            os.path.join(model_dir, "total.tsv"),
            os.path.join(model_dir, "frequencies.tsv"),
            os.path.join(model_dir, "2_total.tsv"),
            os.path.join(model_dir, "2_frequencies.tsv"),
            max_token_length=max_token_length,
        )

    def unigram_log_prob(self, token):
        return self.unigrams.log_prob(token)

    def conditional_log_prob(self, token, previous):
        """
        Log probability of token following previous. Falls back to the
        unigram estimate (and its found flag) when the pair is unknown.
        """
        lp, found = self.bigrams.log_prob(previous + " " + token)
        if found:
            return lp, found
        return self.unigram_log_prob(token)

    def split(self, text, max_token_length=None) -> List[Tuple[str, str]]:
        """
        All (head, tail) splits of text with head lengths 1..max,
        counted in code points.
        """
        if max_token_length is None:
            max_token_length = self.max_token_length
        limit = min(len(text), max_token_length)
        return [(text[:i], text[i:]) for i in range(1, limit + 1)]

    def segment_recurse(self, text, previous, memo):
        # 1. Empty string: log(1)
        if not text:
            return ProbTuple(0.0, ())

        # 2. Already solved. Keyed on the suffix alone, not on previous.
        if text in memo:
            return memo[text]

        # 3. Try every head and keep the best completion
        candidates = []
        for head, tail in self.split(text):
            lp, _ = self.conditional_log_prob(head, previous)
            rest = self.segment_recurse(tail, head, memo)
            candidates.append(rest.combine(lp, head))

        best = max_prob_tuple(candidates)
        memo[text] = best
        return best

    def segment(self, text):
        """
        Segment the text into its most probable token sequence.
        """
        memo = {}

        # Solve suffixes shortest first so recursion never goes deeper than
        # max_token_length. Each suffix text[i:] is first reached top-down
        # with previous=text[i-1], so warm it under that same context.
        for i in range(len(text) - 1, 0, -1):
            self.segment_recurse(text[i:], text[i - 1], memo)

        return list(self.segment_recurse(text, SENTENCE_START, memo).tokens)
