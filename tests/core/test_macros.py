"""Unit tests for macro calculations - pure functions, no mocks needed."""

import pytest

from yahealthy.core.macros import calculate_macro_grams, split_macros


class TestCalculateMacroGrams:
    """Tests for calculate_macro_grams."""

    def test_carbs(self):
        """40% of calories at 4 cal/g."""
        assert calculate_macro_grams(2000, "carbs") == pytest.approx(200)

    def test_protein(self):
        """30% of calories at 4 cal/g."""
        assert calculate_macro_grams(2000, "protein") == pytest.approx(150)

    def test_fat(self):
        """30% of calories at 9 cal/g."""
        assert calculate_macro_grams(1800, "fat") == pytest.approx(60)

    def test_unknown_macro(self):
        """Only carbs, protein and fat are known."""
        with pytest.raises(KeyError):
            calculate_macro_grams(2000, "fiber")


class TestSplitMacros:
    """Tests for split_macros."""

    def test_weekly_split(self):
        """14000 kcal splits into 1400 g carbs, 1050 g protein, 467 g fat."""
        macros = split_macros(14000)
        assert macros.carbs_grams == 1400
        assert macros.protein_grams == 1050
        assert macros.fat_grams == 467

    def test_zero(self):
        """No calories, no macros."""
        macros = split_macros(0)
        assert (macros.carbs_grams, macros.protein_grams, macros.fat_grams) == (0, 0, 0)
