from __future__ import annotations

import unittest

import pandas as pd

from AINAY.server.utils.services.text.normalization import (
    coerce_text,
    first_word,
    normalize_drug_name,
    normalize_interaction_name,
    normalize_whitespace,
)

SAMPLE_NAMES = [
    "Amoxicillin 500 mg",
    "Amoxicillin 500mg",
    "Tylenol (extra strength)",
    "Tylenol 500 mg (caplet)",
    "  Lisinopril   10MG  ",
    "Vitamin D 1000 IU",
    "Metformin 0.5 g",
    "Aspirin 2 tablets",
    "Omeprazole 20 mg 1 capsule",
    "Insulin Glargine (Lantus) 100 units",
    "a (b (c) d)",
    "500 mg",
    "",
    "   ",
]


class NormalizeDrugNameTests(unittest.TestCase):
    # ------------------------------------------------------------------
    def test_strips_dosage_suffixes(self) -> None:
        self.assertEqual(
            normalize_drug_name("Amoxicillin 500 mg"),
            normalize_drug_name("Amoxicillin"),
        )
        self.assertEqual(normalize_drug_name("Amoxicillin 500mg"), "amoxicillin")
        self.assertEqual(normalize_drug_name("Vitamin D 1000 IU"), "vitamin d")
        self.assertEqual(normalize_drug_name("Metformin 0.5 g"), "metformin")
        self.assertEqual(normalize_drug_name("Aspirin 2 tablets"), "aspirin")
        self.assertEqual(normalize_drug_name("Heparin 5000 units"), "heparin")
        self.assertEqual(normalize_drug_name("Cyanocobalamin 250 MCG"), "cyanocobalamin")

    # ------------------------------------------------------------------
    def test_keeps_numbers_that_are_not_trailing_dosages(self) -> None:
        self.assertEqual(normalize_drug_name("Vitamin B12"), "vitamin b12")
        self.assertEqual(normalize_drug_name("5 mg Prednisone"), "5 mg prednisone")

    # ------------------------------------------------------------------
    def test_strips_parentheticals(self) -> None:
        self.assertEqual(
            normalize_drug_name("Tylenol (extra strength)"),
            normalize_drug_name("Tylenol"),
        )
        self.assertEqual(
            normalize_drug_name("Losartan (as potassium) tablets"),
            "losartan tablets",
        )

    # ------------------------------------------------------------------
    def test_collapses_whitespace_and_lowercases(self) -> None:
        self.assertEqual(
            normalize_drug_name("  Insulin \t  GLARGINE \n"),
            "insulin glargine",
        )

    # ------------------------------------------------------------------
    def test_stacked_suffixes_are_removed(self) -> None:
        self.assertEqual(normalize_drug_name("Tylenol 500 mg (caplet)"), "tylenol")
        self.assertEqual(normalize_drug_name("Omeprazole 20 mg 1 capsule"), "omeprazole")

    # ------------------------------------------------------------------
    def test_is_idempotent(self) -> None:
        for name in SAMPLE_NAMES:
            once = normalize_drug_name(name)
            self.assertEqual(normalize_drug_name(once), once, msg=name)

    # ------------------------------------------------------------------
    def test_invalid_input_normalizes_to_empty_key(self) -> None:
        self.assertEqual(normalize_drug_name(""), "")
        self.assertEqual(normalize_drug_name("500 mg"), "")
        self.assertEqual(normalize_drug_name(None), "")
        self.assertEqual(normalize_drug_name(42), "")


class InteractionNameTests(unittest.TestCase):
    # ------------------------------------------------------------------
    def test_removes_trailing_salt_forms(self) -> None:
        self.assertEqual(normalize_interaction_name("Warfarin Sodium"), "warfarin")
        self.assertEqual(
            normalize_interaction_name("Metoprolol Succinate 50 mg"), "metoprolol"
        )
        self.assertEqual(normalize_interaction_name("Sertraline HCl"), "sertraline")

    # ------------------------------------------------------------------
    def test_removes_as_salt_clauses(self) -> None:
        self.assertEqual(normalize_interaction_name("Diclofenac as sodium"), "diclofenac")
        self.assertEqual(
            normalize_interaction_name("Losartan (as potassium) 50 mg"), "losartan"
        )


class TextHelpersTests(unittest.TestCase):
    # ------------------------------------------------------------------
    def test_coerce_text_handles_missing_markers(self) -> None:
        self.assertEqual(coerce_text("  Warfarin "), "Warfarin")
        self.assertIsNone(coerce_text("   "))
        self.assertIsNone(coerce_text(None))
        self.assertIsNone(coerce_text(pd.NA))
        self.assertIsNone(coerce_text(float("nan")))
        self.assertEqual(coerce_text(12), "12")

    # ------------------------------------------------------------------
    def test_normalize_whitespace(self) -> None:
        self.assertEqual(normalize_whitespace("  a \n b\t c "), "a b c")
        self.assertEqual(normalize_whitespace(""), "")

    # ------------------------------------------------------------------
    def test_first_word(self) -> None:
        self.assertEqual(first_word("insulin glargine"), "insulin")
        self.assertEqual(first_word("warfarin"), "warfarin")
        self.assertEqual(first_word(""), "")


if __name__ == "__main__":
    unittest.main()
