import collections
import re

import copyfiles.glob as glob
import shared


class GlobTest(shared.CopyFilesTest):
    def test_split_on_stars_interpreting_backslashes(self):
        cases = [
            ('', ['']),
            ('*', ['', '']),
            ('abc', ['abc']),
            ('ab*c', ['ab', 'c']),
            ('*abc*', ['', 'abc', '']),
            (r'a\*bc', ['a*bc']),
            (r'a\\*bc', ['a\\', 'bc']),
        ]
        for input, output in cases:
            self.assertEqual(
                output, glob.split_on_stars_interpreting_backslashes(input),
                'Failed split for input {}'.format(input))

    def test_glob_to_path_regex(self):
        Case = collections.namedtuple('Case', ['glob', 'matches', 'excludes'])
        cases = [
            Case(
                glob='a/b/c',
                matches=['a/b/c'],
                excludes=['a/b', 'a/b/c/', 'a/b/c/d']),
            Case(
                glob='b/*.log',
                matches=['b/x.log', 'b/.log'],
                excludes=['b/x.txt', 'b/c/x.log', 'x.log']),
            # But * by itself should never match an empty path component.
            Case(
                glob='a/*/c',
                matches=['a/b/c', 'a/boooo/c'],
                excludes=['a/c', 'a/b/d/c', 'a//c']),
            Case(
                glob='a/**/c',
                matches=['a/b/c', 'a/d/e/f/g/c', 'a/c'],
                excludes=['a/b/c/d', 'x/a/c']),
            Case(glob='**/c', matches=['a/b/c', 'c'], excludes=['c/d']),
            # Make sure special characters are escaped properly.
            Case(glob='a|b', matches=['a|b'], excludes=['a', 'b']),
            Case(glob='a\\*', matches=['a*'], excludes=['a', 'aa']),
        ]
        for case in cases:
            regex = glob.glob_to_path_regex(case.glob)
            for m in case.matches:
                assert re.match(regex, m), \
                    'Glob {} (regex: {} ) should match path {}'.format(
                        case.glob, regex, m)
            for e in case.excludes:
                assert not re.match(regex, e), \
                    'Glob {} (regex: {} ) should not match path {}'.format(
                    case.glob, regex, e)

    def test_bad_globs(self):
        for bad_glob in ['**', 'a/b/**', 'a/b/**c/d']:
            with self.assertRaises(glob.GlobError):
                glob.glob_to_path_regex(bad_glob)

    def test_unglobbed_prefix(self):
        assert glob.unglobbed_prefix('a/b/c*/d') == 'a/b'
        assert glob.unglobbed_prefix('a/b/**/d') == 'a/b'
        assert glob.unglobbed_prefix('*/a/b') == ''
        assert glob.unglobbed_prefix('a/b.txt') == 'a/b.txt'

    def test_normalize_file_mask(self):
        cases = [
            ('a.txt', 'a.txt'),
            ('  a.txt ', 'a.txt'),
            ('./a.txt', 'a.txt'),
            ('dir/', 'dir/**/*'),
            ('dir/**', 'dir/**/*'),
            ('**', '**/*'),
            ('a//b', 'a/b'),
            ('', ''),
        ]
        for mask, expected in cases:
            self.assertEqual(expected, glob.normalize_file_mask(mask),
                             'Failed normalizing {!r}'.format(mask))

    def test_file_mask(self):
        mask = glob.FileMask('**/*.log')
        self.assertEqual('', mask.prefix)
        self.assertTrue(mask.matches('x.log'))
        self.assertTrue(mask.matches('a/b/x.log'))
        self.assertFalse(mask.matches('x.txt'))

    def test_file_mask_default_excludes(self):
        mask = glob.FileMask('**')
        self.assertTrue(mask.matches('src/main.c'))
        self.assertFalse(mask.matches('.git/config'))
        self.assertFalse(mask.matches('sub/.svn/entries'))
        self.assertFalse(mask.matches('notes.txt~'))
        self.assertFalse(mask.matches('a/.DS_Store'))
        # Explicit excludes replace the defaults.
        self.assertTrue(glob.FileMask('**', ()).matches('.git/config'))
        # Naming an excluded file directly doesn't bring it back.
        self.assertFalse(glob.FileMask('.gitignore').matches('.gitignore'))

    def test_file_mask_as_directory(self):
        mask = glob.FileMask('assets').as_directory()
        self.assertEqual('assets/**/*', mask.mask)
        self.assertEqual('assets', mask.prefix)
        self.assertTrue(mask.matches('assets/img/logo.png'))
        self.assertFalse(mask.matches('assets'))
        self.assertFalse(mask.matches('assets/.git/HEAD'))

    def test_empty_file_mask(self):
        with self.assertRaises(glob.GlobError):
            glob.FileMask('  ')

    def test_file_mask_must_stay_relative(self):
        for mask in ['/etc', '/etc/**', '../a.txt', 'a/../../b', 'a/..']:
            with self.assertRaises(glob.GlobError):
                glob.FileMask(mask)
        self.assertEqual('a..b', glob.FileMask('a..b').mask)

    def test_glob_error_keeps_braces(self):
        with self.assertRaises(glob.GlobError) as cm:
            glob.FileMask('build{n}**')
        self.assertIn('"build{n}**"', cm.exception.message)
