"""Tests for tutor/annotations/repair.py"""

from tutor.annotations import repair, find_occurrences, closest_occurrence
from tutor.schemas import Annotation, AnnotationType


def make(text, start=0, end=0, type="grammar"):
    return Annotation(text=text, start=start, end=end, type=type, explanation="note")


class TestFindOccurrences:
    def test_overlapping_occurrences_are_all_found(self):
        assert find_occurrences("aaaa", "aa") == [0, 1, 2]

    def test_no_occurrence(self):
        assert find_occurrences("abc", "x") == []

    def test_empty_needle_has_no_occurrences(self):
        assert find_occurrences("abc", "") == []


class TestClosestOccurrence:
    def test_picks_nearest_to_claim(self):
        assert closest_occurrence([2, 10, 20], 12) == 10

    def test_tie_goes_to_earlier(self):
        assert closest_occurrence([4, 8], 6) == 4

    def test_empty(self):
        assert closest_occurrence([], 3) is None


class TestRepair:
    def test_empty_list(self, sentence):
        assert repair(sentence, []) == []

    def test_correct_offsets_are_kept(self, sentence):
        """Offsets that already slice the text out of the sentence stay put."""
        [result] = repair(sentence, [make("have went", 2, 11)])
        assert (result.start, result.end) == (2, 11)
        assert result.text == "have went"
        assert result.identity == 0
        assert result.type == AnnotationType.GRAMMAR

    def test_claim_at_sentence_start_is_relocated(self, sentence):
        """'have went' claimed at 0..9 actually lives at 2..11."""
        [result] = repair(sentence, [make("have went", 0, 9)])
        assert (result.start, result.end) == (2, 11)
        assert sentence[result.start:result.end] == "have went"

    def test_wrong_offset_is_relocated(self, sentence):
        [result] = repair(sentence, [make("went", 99, 103)])
        assert (result.start, result.end) == (7, 11)

    def test_unmatched_text_is_dropped(self, sentence):
        annotations = [make("went", 7, 11), make("xyz", 0, 3)]
        result = repair(sentence, annotations)
        assert len(result) == len(annotations) - 1
        assert [a.text for a in result] == ["went"]

    def test_closest_occurrence_wins(self):
        sentence = "the cat saw the dog near the tree"
        [result] = repair(sentence, [make("the", 23, 26)])
        assert result.start == 25

    def test_equidistant_occurrences_prefer_earlier(self):
        sentence = "abxxab"
        [result] = repair(sentence, [make("ab", 2, 4)])
        assert result.start == 0

    def test_trimmed_fallback(self, sentence):
        """Whitespace the sentence doesn't have is trimmed from the text."""
        [result] = repair(sentence, [make("  store\n", 17, 25)])
        assert result.text == "store"
        assert (result.start, result.end) == (19, 24)

    def test_exact_match_beats_trimmed(self):
        sentence = "go home, go "
        [result] = repair(sentence, [make("go ", 0, 0)])
        assert result.text == "go "
        assert result.start == 0

    def test_whitespace_only_text_is_dropped(self, sentence):
        assert repair(sentence, [make("   ", 1, 4)]) == []

    def test_empty_text_is_dropped(self, sentence):
        assert repair(sentence, [make("", 0, 0)]) == []

    def test_offsets_out_of_range_are_searched(self, sentence):
        [result] = repair(sentence, [make("yesterday", -5, 400)])
        assert sentence[result.start:result.end] == "yesterday"

    def test_inverted_range_is_searched(self, sentence):
        [result] = repair(sentence, [make("store", 24, 19)])
        assert (result.start, result.end) == (19, 24)

    def test_duplicates_are_kept(self, sentence):
        result = repair(sentence, [make("have", 2, 6), make("have", 2, 6, type="vocabulary")])
        assert [a.identity for a in result] == [0, 1]

    def test_output_sorted_by_start_then_identity(self, sentence):
        annotations = [
            make("yesterday", 25, 34),
            make("went", 7, 11),
            make("have", 2, 6),
            make("have went", 2, 11),
        ]
        result = repair(sentence, annotations)
        assert [(a.start, a.identity) for a in result] == [(2, 2), (2, 3), (7, 1), (25, 0)]

    def test_identity_is_input_index_even_after_drops(self, sentence):
        result = repair(sentence, [make("nope"), make("store", 19, 24)])
        assert [a.identity for a in result] == [1]

    def test_payload_is_preserved(self, sentence):
        annotation = Annotation(
            text="store", start=0, end=0, type="vocabulary",
            explanation="A shop.", examples=["a corner store"],
        )
        [result] = repair(sentence, [annotation])
        assert result.explanation == "A shop."
        assert result.examples == ["a corner store"]
