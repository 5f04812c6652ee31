"""Tests for Hangul initial-consonant indexing and Korean ordering."""

import pytest

from parish_ledger.engine.collation import compare_korean, korean_sort_key
from parish_ledger.engine.hangul import (
    CONSONANTS,
    OTHER_BUCKET,
    decompose,
    filter_by_initial,
    group_by_initial,
    initial_consonant,
)
from parish_ledger.models import Member


def _member(member_id, name):
    return Member(id=member_id, name=name, position="성도")


class TestInitialConsonant:
    """Tests for initial_consonant."""

    def test_plain_initial(self):
        """Test a plain leading consonant."""
        assert initial_consonant("김철수") == "ㄱ"
        assert initial_consonant("하은") == "ㅎ"

    def test_tense_initial_maps_to_plain(self):
        """Test that tense consonants share the plain bucket."""
        assert initial_consonant("까치") == "ㄱ"
        assert initial_consonant("또순") == "ㄷ"
        assert initial_consonant("빵집") == "ㅂ"
        assert initial_consonant("쌍둥이") == "ㅅ"
        assert initial_consonant("짱구") == "ㅈ"

    def test_non_hangul_goes_to_other(self):
        """Test digits, Latin letters and empty names."""
        assert initial_consonant("123") == OTHER_BUCKET
        assert initial_consonant("John") == OTHER_BUCKET
        assert initial_consonant("") == OTHER_BUCKET

    def test_bare_jamo_is_not_a_syllable(self):
        """Test that a standalone jamo is outside the syllable block."""
        assert initial_consonant("ㄱ") == OTHER_BUCKET

    def test_block_boundaries(self):
        """Test the first and last syllables of the block."""
        assert decompose("가") == (0, 0, 0)
        assert decompose("힣") == (18, 20, 27)
        assert decompose("A") is None

    def test_fourteen_buckets(self):
        """Test the bucket list."""
        assert len(CONSONANTS) == 14
        assert CONSONANTS[0] == "ㄱ"
        assert CONSONANTS[-1] == "ㅎ"


class TestGrouping:
    """Tests for group_by_initial and filter_by_initial."""

    @pytest.fixture
    def people(self):
        return [
            _member(1, "홍길동"),
            _member(2, "김철수"),
            _member(3, "까치"),
            _member(4, "Anna"),
            _member(5, "박영희"),
        ]

    def test_partition_is_complete(self, people):
        """Test that every member lands in exactly one bucket."""
        groups = group_by_initial(people)
        grouped_ids = [m.id for bucket in groups.values() for m in bucket]
        assert sorted(grouped_ids) == [1, 2, 3, 4, 5]

    def test_bucket_order(self, people):
        """Test that buckets follow consonant order with the other bucket last."""
        groups = group_by_initial(people)
        assert list(groups) == ["ㄱ", "ㅂ", "ㅎ", OTHER_BUCKET]

    def test_input_order_kept_within_bucket(self, people):
        """Test stable bucket contents."""
        groups = group_by_initial(people)
        assert [m.name for m in groups["ㄱ"]] == ["김철수", "까치"]

    def test_filter_by_initial(self, people):
        """Test filtering one bucket."""
        assert [m.id for m in filter_by_initial(people, "ㄱ")] == [2, 3]
        assert [m.id for m in filter_by_initial(people, OTHER_BUCKET)] == [4]
        assert len(filter_by_initial(people, None)) == 5

    def test_filter_rejects_unknown_bucket(self, people):
        """Test that tense consonants are not bucket keys."""
        with pytest.raises(ValueError):
            filter_by_initial(people, "ㄲ")


class TestKoreanCollation:
    """Tests for korean_sort_key and compare_korean."""

    def test_hangul_dictionary_order(self):
        """Test ordering of Hangul names."""
        names = ["하은", "김철수", "박영희", "가람", "까치", "나래"]
        assert sorted(names, key=korean_sort_key) == ["가람", "김철수", "까치", "나래", "박영희", "하은"]

    def test_script_classes(self):
        """Test whitespace, punctuation, digits, Hangul, Han, then Latin."""
        values = ["a", "金", "가", "1", "(", "-", "_", " "]
        assert sorted(values, key=korean_sort_key) == [" ", "_", "-", "(", "1", "가", "金", "a"]

    def test_hangul_before_latin(self):
        """Test that Hangul names and labels precede Latin ones."""
        assert compare_korean("가", "a") < 0
        assert compare_korean("김철수", "John") < 0
        assert sorted(["IT장비", "교육비"], key=korean_sort_key, reverse=True) == ["IT장비", "교육비"]

    def test_han_between_hangul_and_latin(self):
        """Test Hanja placement."""
        assert sorted(["John", "金영", "김철수"], key=korean_sort_key) == ["김철수", "金영", "John"]

    def test_accents_break_ties_only(self):
        """Test that accented Latin sorts with its base letter."""
        assert sorted(["ecz", "éclair", "eclair"], key=korean_sort_key) == ["eclair", "éclair", "ecz"]

    def test_syllables_compare_jamo_by_jamo(self):
        """Test that an open syllable followed by more text precedes a closed one."""
        assert compare_korean("가나", "각") < 0
        assert compare_korean("각", "가a") < 0

    def test_digits_by_value(self):
        """Test that digits compare by value, character by character."""
        assert sorted(["2월", "10월", "1월"], key=korean_sort_key) == ["10월", "1월", "2월"]

    def test_latin_is_case_insensitive(self):
        """Test that case only breaks ties, lowercase first."""
        assert sorted(["b", "B", "a", "A"], key=korean_sort_key) == ["a", "A", "b", "B"]

    def test_bare_jamo_before_syllables(self):
        """Test that ㄱ sorts before every syllable starting with it."""
        assert compare_korean("ㄱ", "가") < 0
        assert compare_korean("ㄱ", "나") < 0

    def test_prefix_sorts_first(self):
        """Test that a prefix precedes longer strings."""
        assert compare_korean("교육", "교육비") < 0

    def test_nfc_equivalence(self):
        """Test that decomposed jamo compare equal to the precomposed syllable."""
        assert compare_korean("\u1100\u1161", "가") == 0

    def test_compare_is_three_way(self):
        """Test comparison results."""
        assert compare_korean("가", "나") == -1
        assert compare_korean("나", "가") == 1
        assert compare_korean("가", "가") == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
