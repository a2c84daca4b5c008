"""Unit tests for species name folding."""
import pytest

from species.normalizer import looks_like_scientific, normalize_name, title_case


class TestNormalizeName:
    """Tests for normalize_name."""

    @pytest.mark.parametrize("raw,expected", [
        ("Hecht", "hecht"),
        ("  Esox   LUCIUS ", "esox lucius"),
        ("Döbel", "doebel"),
        ("Große Maräne", "grosse maraene"),
        ("Regenbogen-Forelle", "regenbogen forelle"),
        ("Saibling (See)", "saibling see"),
        ("Crevé", "creve"),
    ])
    def test_folds_case_umlauts_and_punctuation(self, raw, expected):
        # Assert
        assert normalize_name(raw) == expected

    def test_umlaut_and_digraph_spelling_are_equal(self):
        # Assert
        assert normalize_name("Döbel") == normalize_name("Doebel")
        assert normalize_name("Äsche") == normalize_name("aesche")

    @pytest.mark.parametrize("raw", ["Döbel", " Zander!!", "Esox_lucius", "Große   Maräne", ""])
    def test_idempotent(self, raw):
        # Act
        once = normalize_name(raw)

        # Assert
        assert normalize_name(once) == once

    def test_empty_and_none(self):
        # Assert
        assert normalize_name(None) == ""
        assert normalize_name("") == ""
        assert normalize_name("  --  ") == ""


class TestTitleCase:
    """Tests for the fallback label formatter."""

    def test_splits_on_underscores_and_dashes(self):
        # Assert
        assert title_case("sea_TROUT") == "Sea Trout"
        assert title_case("totally-unknown-fish-xyz") == "Totally Unknown Fish Xyz"

    def test_empty(self):
        # Assert
        assert title_case(None) == ""
        assert title_case("   ") == ""


class TestLooksLikeScientific:
    """Tests for the binomial heuristic."""

    def test_two_letter_tokens(self):
        # Assert
        assert looks_like_scientific("Esox lucius")
        assert looks_like_scientific("esox LUCIUS")

    def test_rejects_other_shapes(self):
        # Assert
        assert not looks_like_scientific("pike")
        assert not looks_like_scientific("Salmo trutta fario")
        assert not looks_like_scientific("Esox lucius2")
        assert not looks_like_scientific(None)
