"""
Unit tests for Calculator display formatting.
"""
import unittest

from app.projects.calculator.core.constants import ERROR
from app.projects.calculator.core.formatting import (
    equation,
    format_number,
    number_to_string,
    parse_number,
    pending_display,
)


class TestFormatNumber(unittest.TestCase):

    def test_groups_integer_part(self):
        self.assertEqual(format_number("1234567"), "1,234,567")
        self.assertEqual(format_number("999"), "999")

    def test_error_and_nan_unchanged(self):
        self.assertEqual(format_number(ERROR), ERROR)
        self.assertEqual(format_number("NaN"), "NaN")
        self.assertEqual(format_number("-NaN"), "-NaN")

    def test_keeps_trailing_decimal_point(self):
        self.assertEqual(format_number("12."), "12.")
        self.assertEqual(format_number("1234."), "1,234.")
        self.assertEqual(format_number("0."), "0.")

    def test_fraction_is_not_grouped_or_rounded(self):
        self.assertEqual(format_number("1234.50"), "1,234.50")
        self.assertEqual(format_number("0.123456789"), "0.123456789")

    def test_negative_numbers(self):
        self.assertEqual(format_number("-1234"), "-1,234")
        self.assertEqual(format_number("-0.5"), "-0.5")

    def test_long_digit_strings_group_exactly(self):
        self.assertEqual(format_number("12345678901234567890"), "12,345,678,901,234,567,890")

    def test_exponent_notation_unchanged(self):
        self.assertEqual(format_number("1e+21"), "1e+21")
        self.assertEqual(format_number("1.5e-7"), "1.5e-7")

    def test_non_numbers_unchanged(self):
        self.assertEqual(format_number("Infinity"), "Infinity")
        self.assertEqual(format_number("abc"), "abc")


class TestNumberToString(unittest.TestCase):

    def test_whole_numbers_have_no_fraction(self):
        self.assertEqual(number_to_string(5.0), "5")
        self.assertEqual(number_to_string(-2.0), "-2")
        self.assertEqual(number_to_string(-0.0), "0")
        self.assertEqual(number_to_string(1e20), "100000000000000000000")

    def test_fractions(self):
        self.assertEqual(number_to_string(0.015), "0.015")
        self.assertEqual(number_to_string(0.1 + 0.2), "0.30000000000000004")

    def test_small_magnitudes(self):
        self.assertEqual(number_to_string(0.00001234), "0.00001234")
        self.assertEqual(number_to_string(0.000001), "0.000001")
        self.assertEqual(number_to_string(0.0000001), "1e-7")
        self.assertEqual(number_to_string(-1.5e-7), "-1.5e-7")

    def test_large_magnitudes(self):
        self.assertEqual(number_to_string(1e21), "1e+21")
        self.assertEqual(number_to_string(2.5e22), "2.5e+22")

    def test_non_finite(self):
        self.assertEqual(number_to_string(float("inf")), "Infinity")
        self.assertEqual(number_to_string(float("-inf")), "-Infinity")
        self.assertEqual(number_to_string(float("nan")), "NaN")


class TestParseNumber(unittest.TestCase):

    def test_accepts_operand_forms(self):
        self.assertEqual(parse_number("12"), 12.0)
        self.assertEqual(parse_number("12."), 12.0)
        self.assertEqual(parse_number("-0.5"), -0.5)
        self.assertEqual(parse_number("1e-7"), 1e-7)

    def test_rejects_everything_else(self):
        for text in ("", "-", ".", "1_000", " 5", "inf", "nan", "Error", "1e", None):
            self.assertIsNone(parse_number(text), text)


class TestDisplayLines(unittest.TestCase):

    def test_pending_display(self):
        self.assertEqual(pending_display("1200", "*"), "1,200 ×")
        self.assertEqual(pending_display("5", "-"), "5 −")
        self.assertEqual(pending_display(None, None), "")

    def test_equation(self):
        self.assertEqual(equation("1000", "/", "8", "125"), "1,000 ÷ 8 = 125")


if __name__ == "__main__":
    unittest.main()
