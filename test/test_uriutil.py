import os
import sys
import tempfile
import unittest
from pathlib import Path

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsvalidator.uriutil import (canonical_uri, path_to_uri, remove_dot_segments, resolve_uri, resource_uri,
                                 split_fragment, uri_to_path)


class TestResolveUri(unittest.TestCase):
    """Reference resolution examples from RFC 3986, section 5.4."""

    base = 'http://a/b/c/d;p?q'

    def test_normal_examples(self):
        examples = {
            'g': 'http://a/b/c/g',
            './g': 'http://a/b/c/g',
            'g/': 'http://a/b/c/g/',
            '/g': 'http://a/g',
            '//g': 'http://g',
            '?y': 'http://a/b/c/d;p?y',
            'g?y': 'http://a/b/c/g?y',
            '#s': 'http://a/b/c/d;p?q#s',
            'g#s': 'http://a/b/c/g#s',
            '': 'http://a/b/c/d;p?q',
            '.': 'http://a/b/c/',
            '..': 'http://a/b/',
            '../g': 'http://a/b/g',
            '../..': 'http://a/',
            '../../g': 'http://a/g',
        }
        for ref, expected in examples.items():
            with self.subTest(ref=ref):
                self.assertEqual(resolve_uri(ref, self.base), expected)

    def test_abnormal_examples(self):
        self.assertEqual(resolve_uri('../../../g', self.base), 'http://a/g')
        self.assertEqual(resolve_uri('/./g', self.base), 'http://a/g')
        self.assertEqual(resolve_uri('g/..', self.base), 'http://a/b/c/')

    def test_sibling_document(self):
        self.assertEqual(resolve_uri('child.json#/defs/pos', 'file:///s/root.json'),
                         'file:///s/child.json#/defs/pos')

    def test_fragment_only_identifier(self):
        self.assertEqual(resolve_uri('#foo', 'http://example.com/root.json'), 'http://example.com/root.json#foo')
        self.assertEqual(resolve_uri('b#', 'http://e/a#'), 'http://e/b')

    def test_custom_scheme(self):
        self.assertEqual(resolve_uri('other.json', 'store://host/dir/a.json'), 'store://host/dir/other.json')

    def test_absolute_reference_wins(self):
        self.assertEqual(resolve_uri('urn:example:x', 'http://e/a'), 'urn:example:x')

    def test_empty_base(self):
        self.assertEqual(resolve_uri('http://e/a#'), 'http://e/a')
        self.assertEqual(resolve_uri('#/definitions/x'), '#/definitions/x')


class TestUriHelpers(unittest.TestCase):

    def test_canonical_uri_drops_empty_fragment(self):
        self.assertEqual(canonical_uri('http://e/a#'), 'http://e/a')
        self.assertEqual(canonical_uri('http://e/a#/x'), 'http://e/a#/x')
        self.assertEqual(canonical_uri(''), '')

    def test_remove_dot_segments(self):
        self.assertEqual(remove_dot_segments('/a/b/c/./../../g'), '/a/g')
        self.assertEqual(remove_dot_segments('mid/content=5/../6'), 'mid/6')

    def test_split_fragment(self):
        self.assertEqual(split_fragment('http://e/a#/x/y'), ('http://e/a', '/x/y'))
        self.assertEqual(split_fragment('http://e/a'), ('http://e/a', ''))

    def test_file_uri_round_trip(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'my schema.json')
            uri = path_to_uri(path)
            self.assertTrue(uri.startswith('file:///'))
            self.assertIn('my%20schema.json', uri)
            self.assertEqual(uri_to_path(uri), str(Path(path).resolve()))

    def test_resource_uri(self):
        self.assertEqual(resource_uri('http://e/a.json'), 'http://e/a.json')
        self.assertTrue(resource_uri('schemas/a.json').startswith('file:///'))
        self.assertTrue(resource_uri('schemas/a.json').endswith('/schemas/a.json'))


if __name__ == '__main__':
    unittest.main()
