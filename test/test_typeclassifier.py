"""Tests for strict and loose JSON type classification."""

import os
import sys
import unittest
from unittest.mock import patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsvalidator.errors import UnknownTypeDetected
from jsvalidator.typeclassifier import detect_type, is_type, looks_like_number, round_half_away


class TestRounding(unittest.TestCase):

    def test_round_half_away_from_zero(self):
        self.assertEqual(round_half_away(0.5), 1)
        self.assertEqual(round_half_away(2.5), 3)
        self.assertEqual(round_half_away(-0.5), -1)
        self.assertEqual(round_half_away(-2.4), -2)
        self.assertEqual(round_half_away(7.0), 7)


class TestIntegerClassification(unittest.TestCase):

    def test_half_values_are_not_integers(self):
        self.assertFalse(is_type(2.5, 'integer', strict=False))
        self.assertFalse(is_type(-0.5, 'integer', strict=False))
        self.assertFalse(is_type(2.5, 'integer'))

    def test_integral_float_is_integer(self):
        self.assertTrue(is_type(2.0, 'integer'))
        self.assertTrue(is_type(-3.0, 'integer', strict=False))
        self.assertTrue(is_type(10, 'integer'))

    def test_non_finite_is_never_integer(self):
        self.assertFalse(is_type(float('inf'), 'integer'))
        self.assertFalse(is_type(float('nan'), 'integer'))
        self.assertFalse(is_type('-Infinity', 'integer', strict=False))
        self.assertTrue(is_type(float('inf'), 'number'))

    def test_numeric_strings(self):
        self.assertFalse(is_type('12', 'integer'))
        self.assertTrue(is_type('12', 'integer', strict=False))
        self.assertTrue(is_type(' 42 ', 'number', strict=False))
        self.assertTrue(is_type('1e3', 'integer', strict=False))
        self.assertFalse(is_type('1.5', 'integer', strict=False))
        self.assertFalse(is_type('12abc', 'number', strict=False))

    def test_large_integers(self):
        self.assertTrue(is_type(10 ** 400, 'integer'))
        self.assertTrue(is_type(-10 ** 400, 'integer', strict=False))
        self.assertTrue(is_type(10 ** 400, 'number'))
        self.assertEqual(detect_type(10 ** 400), 'integer')

    def test_booleans_are_not_numbers(self):
        self.assertFalse(is_type(True, 'integer'))
        self.assertFalse(is_type(False, 'number', strict=False))


class TestBooleanClassification(unittest.TestCase):

    def test_strict_boolean(self):
        self.assertTrue(is_type(True, 'boolean'))
        self.assertTrue(is_type(False, 'boolean'))
        self.assertFalse(is_type(0, 'boolean'))
        self.assertFalse(is_type('', 'boolean'))
        self.assertFalse(is_type(None, 'boolean'))

    def test_loose_boolean(self):
        self.assertTrue(is_type(0, 'boolean', strict=False))
        self.assertTrue(is_type(1, 'boolean', strict=False))
        self.assertTrue(is_type('1', 'boolean', strict=False))
        self.assertTrue(is_type('0.0', 'boolean', strict=False))
        self.assertTrue(is_type('', 'boolean', strict=False))
        self.assertTrue(is_type(None, 'boolean', strict=False))
        self.assertFalse(is_type(2, 'boolean', strict=False))
        self.assertFalse(is_type('yes', 'boolean', strict=False))
        self.assertFalse(is_type([], 'boolean', strict=False))


class TestOtherTypes(unittest.TestCase):

    def test_containers_and_null(self):
        self.assertTrue(is_type([], 'array'))
        self.assertTrue(is_type({}, 'object'))
        self.assertTrue(is_type(None, 'null'))
        self.assertFalse(is_type({}, 'array'))
        self.assertFalse(is_type(0, 'null', strict=False))

    def test_string(self):
        self.assertTrue(is_type('abc', 'string'))
        self.assertFalse(is_type(5, 'string'))
        self.assertTrue(is_type(5, 'string', strict=False))
        self.assertFalse(is_type(None, 'string', strict=False))
        self.assertFalse(is_type(True, 'string', strict=False))

    def test_unknown_type_name(self):
        self.assertFalse(is_type('abc', 'text'))

    def test_looks_like_number(self):
        self.assertTrue(looks_like_number('-.5'))
        self.assertTrue(looks_like_number('NaN'))
        self.assertTrue(looks_like_number(3))
        self.assertFalse(looks_like_number(True))
        self.assertFalse(looks_like_number('0x10'))
        self.assertFalse(looks_like_number(None))


class TestDetectType(unittest.TestCase):

    def test_strict_detection(self):
        self.assertEqual(detect_type([1]), 'array')
        self.assertEqual(detect_type({'a': 1}), 'object')
        self.assertEqual(detect_type(None), 'null')
        self.assertEqual(detect_type(3), 'integer')
        self.assertEqual(detect_type(3.0), 'integer')
        self.assertEqual(detect_type(3.25), 'number')
        self.assertEqual(detect_type(True), 'boolean')
        self.assertEqual(detect_type('12'), 'string')

    def test_loose_detection_prefers_numbers(self):
        self.assertEqual(detect_type('12', strict=False), 'integer')
        self.assertEqual(detect_type('1.5', strict=False), 'number')
        self.assertEqual(detect_type(0, strict=False), 'integer')
        self.assertEqual(detect_type(None, strict=False), 'null')
        self.assertEqual(detect_type(True, strict=False), 'boolean')
        self.assertEqual(detect_type('', strict=False), 'boolean')
        self.assertEqual(detect_type('abc', strict=False), 'string')

    def test_opaque_values_are_refs(self):
        self.assertEqual(detect_type(object()), '_ref')

    @patch.dict('jsvalidator.typeclassifier.TYPE_MAP', {'_ref': lambda value, strict: False})
    def test_unclassifiable_value_raises(self):
        with self.assertRaises(UnknownTypeDetected):
            detect_type(object())


if __name__ == '__main__':
    unittest.main()
