import dataclasses
import unittest

from fractionary import Fraction, RepeatingDecimal


class RepeatingDecimalTests(unittest.TestCase):
    def test_parse_all_groups(self):
        decimal = RepeatingDecimal.from_string("1.23(456)")
        self.assertEqual(decimal, RepeatingDecimal(1, "1", "23", "456"))

    def test_sign_is_stripped_from_integer(self):
        decimal = RepeatingDecimal.from_string("-0.(03)")
        self.assertEqual(decimal.sign, -1)
        self.assertEqual(decimal.integer, "0")
        self.assertIsNone(decimal.non_repeating)
        self.assertEqual(decimal.repeating, "03")

    def test_optional_groups(self):
        self.assertEqual(RepeatingDecimal.from_string("  12  "), RepeatingDecimal(1, "12"))
        self.assertEqual(RepeatingDecimal.from_string("1."), RepeatingDecimal(1, "1"))
        self.assertEqual(RepeatingDecimal.from_string("+7.5"), RepeatingDecimal(1, "7", "5"))

    def test_leading_zeros_are_preserved(self):
        decimal = RepeatingDecimal.from_string("0.007(0030)")
        self.assertEqual(decimal.non_repeating, "007")
        self.assertEqual(decimal.repeating, "0030")

    def test_invalid_text(self):
        for text in ["", "abc", "-", "1.2.3", "1.()", "1.(a)", ".5", "1(3)", "1.2(3)4", "1.(-3)", "1 .5",
                     "١.(٣)", "٣", "1.(٣)"]:
            with self.subTest(text=text):
                self.assertIsNone(RepeatingDecimal.from_string(text))

    def test_str(self):
        self.assertEqual(str(RepeatingDecimal.from_string("-1.2(3)")), "-1.2(3)")
        self.assertEqual(str(RepeatingDecimal.from_string("0.(3)")), "0.(3)")
        self.assertEqual(str(RepeatingDecimal.from_string("5")), "5")

    def test_is_frozen(self):
        decimal = RepeatingDecimal.from_string("0.5")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            decimal.sign = -1

    def test_conversion_to_fraction(self):
        value = Fraction.from_repeating_decimal(RepeatingDecimal(1, "0", repeating="03"))
        self.assertTrue(value.strict_equals(Fraction(1, 33)))

        value = Fraction.from_repeating_decimal(RepeatingDecimal.from_string("-2.1(6)"))
        self.assertTrue(value.strict_equals(Fraction(-13, 6)))


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
