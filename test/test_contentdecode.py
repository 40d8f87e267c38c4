import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsvalidator.contentdecode import decode_content
from jsvalidator.errors import UnsupportedContent
from jsvalidator.typeclassifier import detect_type


class TestDecodeContent(unittest.TestCase):

    def test_json_without_hint(self):
        self.assertEqual(decode_content(b'{"type": "integer", "minimum": 1}', None, 'a.json'),
                         {'type': 'integer', 'minimum': 1})

    def test_yaml_without_hint(self):
        self.assertEqual(decode_content('type: object\nrequired: [name]\n', None, 'a'),
                         {'type': 'object', 'required': ['name']})

    def test_yaml_hint(self):
        self.assertEqual(decode_content('maximum: 2.5\nnullable: true\n', 'text/vnd.yaml', 'a.yaml'),
                         {'maximum': 2.5, 'nullable': True})

    def test_json_hint_with_parameters(self):
        self.assertEqual(decode_content('[1, 2]', 'application/schema+json; charset=utf-8', 'a'), [1, 2])

    def test_wrong_hint_falls_back_to_guessing(self):
        with self.assertLogs('jsvalidator.contentdecode', level='DEBUG') as logs:
            result = decode_content('type: string\n', 'application/json', 'mislabeled.json')
        self.assertEqual(result, {'type': 'string'})
        self.assertIn('mislabeled.json', logs.output[0])

    def test_unrelated_hint_is_ignored(self):
        self.assertEqual(decode_content('{"a": null}', 'text/plain', 'a'), {'a': None})

    def test_native_scalar_types(self):
        result = decode_content('{"i": 1, "f": 1.5, "b": false, "s": "1"}', None, 'a')
        self.assertIsInstance(result['i'], int)
        self.assertIsInstance(result['f'], float)
        self.assertIs(result['b'], False)
        self.assertIsInstance(result['s'], str)

    def test_yaml_timestamps_stay_strings(self):
        self.assertEqual(decode_content('2020-01-01', 'text/vnd.yaml', 'a.yaml'), '2020-01-01')
        result = decode_content('created: 2001-12-14t21:59:43.10-05:00\ndefault: 2020-01-01\n', None, 'a')
        self.assertEqual(result, {'created': '2001-12-14t21:59:43.10-05:00', 'default': '2020-01-01'})
        self.assertEqual(detect_type(result['default']), 'string')

    def test_yaml_booleans_are_only_true_and_false(self):
        result = decode_content('answer: yes\nflag: true\nswitch: off\nupper: FALSE\n', 'text/vnd.yaml', 'a.yaml')
        self.assertEqual(result, {'answer': 'yes', 'flag': True, 'switch': 'off', 'upper': False})
        self.assertEqual(decode_content('on: off\n', None, 'a'), {'on': 'off'})
        self.assertEqual(detect_type(decode_content('[n]', 'text/vnd.yaml', 'a.yaml')[0]), 'string')

    def test_byte_order_mark(self):
        self.assertEqual(decode_content('\ufeff{"a": 1}'.encode('utf-8'), 'application/json', 'bom.json'), {'a': 1})

    def test_empty_content(self):
        with self.assertRaises(UnsupportedContent):
            decode_content(b'  \n', None, 'empty.json')

    def test_not_utf8(self):
        with self.assertRaises(UnsupportedContent):
            decode_content(b'\xff\xfe\xfa', None, 'binary')

    def test_undecodable_content(self):
        with self.assertRaises(UnsupportedContent) as ctx:
            decode_content('{a: [1, 2', None, 'broken.yaml')
        self.assertEqual(ctx.exception.resource, 'broken.yaml')


if __name__ == '__main__':
    unittest.main()
