import io
import os

from copyfiles import copier
from copyfiles.copier import (Copied, SourceMissing, ZeroMatched, IOFailure,
                              InvalidPattern)
from copyfiles import display
from copyfiles.filepath import FilePath
import shared


class FakeDir:
    '''A source directory whose copies blow up with a given exception.'''

    def __init__(self, error, fail_on='broken.txt'):
        self.error = error
        self.fail_on = fail_on
        self.calls = []

    def exists(self):
        return True

    def copy_recursive_to(self, file_mask, target):
        self.calls.append(file_mask)
        if file_mask == self.fail_on:
            raise self.error
        return 1

    def __str__(self):
        return '/fake'


class CopierTest(shared.CopyFilesTest):
    def setUp(self):
        self.output = io.StringIO()
        self.display = display.BaseDisplay(self.output)
        self.source = FilePath.local(shared.create_dir({
            'a.txt': 'a',
            'b/readme.md': 'b',
        }))
        self.dest_dir = shared.create_dir()
        self.dest = FilePath.local(self.dest_dir)

    def test_missing_source(self):
        missing = self.source.child('nope')
        outcomes = copier.copy_all(missing, self.dest, 'a.txt, b',
                                   self.display)
        self.assertEqual([SourceMissing(missing)], outcomes)
        self.assertEqual(1, self.display.error_count)
        self.assertIn("Specified file directory '{}' does not exist."
                      .format(missing), self.output.getvalue())
        shared.assert_contents(self.dest_dir, {})

    def test_every_entry_is_tried(self):
        outcomes = copier.copy_all(self.source, self.dest, 'a.txt, b/*.log',
                                   self.display)
        self.assertEqual([
            Copied('a.txt', 1, self.source, self.dest),
            ZeroMatched('b/*.log', self.source, self.dest),
        ], outcomes)
        self.assertEqual(1, self.display.error_count)
        shared.assert_contents(self.dest_dir, {'a.txt': 'a'})

    def test_zero_matched_does_not_stop_the_batch(self):
        outcomes = copier.copy_all(self.source, self.dest, 'nope, a.txt, b',
                                   self.display)
        self.assertEqual([ZeroMatched, Copied, Copied],
                         [type(o) for o in outcomes])
        shared.assert_contents(self.dest_dir, {
            'a.txt': 'a',
            'b/readme.md': 'b',
        })

    def test_io_failure_is_isolated(self):
        error = PermissionError('denied')
        source = FakeDir(error)
        outcomes = copier.copy_all(source, self.dest,
                                   'a.txt, broken.txt, c.txt', self.display)
        self.assertEqual(['a.txt', 'broken.txt', 'c.txt'], source.calls)
        self.assertEqual(IOFailure('broken.txt', source, error), outcomes[1])
        self.assertEqual([Copied, IOFailure, Copied],
                         [type(o) for o in outcomes])
        self.assertIn("Fail to copy 'broken.txt' from '/fake': denied",
                      self.output.getvalue())

    def test_invalid_pattern(self):
        outcomes = copier.copy_all(self.source, self.dest, 'a**b, a.txt',
                                   self.display)
        self.assertIsInstance(outcomes[0], InvalidPattern)
        self.assertIsInstance(outcomes[1], Copied)

    def test_braces_in_a_mask_are_reported(self):
        outcomes = copier.copy_all(self.source, self.dest, 'build{n}**, a.txt',
                                   self.display)
        self.assertEqual([InvalidPattern, Copied],
                         [type(o) for o in outcomes])
        self.assertIn("Can't copy 'build{n}**'", self.output.getvalue())
        self.assertEqual(1, self.display.error_count)

    def test_masks_stay_inside_both_directories(self):
        parent = shared.create_dir({'src/a.txt': 'a', 'secret.txt': 'no'})
        source = FilePath.local(os.path.join(parent, 'src'))
        dest = FilePath.local(os.path.join(parent, 'dest'))
        outcomes = copier.copy_all(
            source, dest, '../secret.txt, {}, a.txt'.format(
                os.path.join(parent, 'secret.txt')),
            self.display)
        self.assertEqual([InvalidPattern, InvalidPattern, Copied],
                         [type(o) for o in outcomes])
        self.assertEqual(['dest', 'secret.txt', 'src'],
                         sorted(os.listdir(parent)))
        shared.assert_contents(os.path.join(parent, 'dest'), {'a.txt': 'a'})

    def test_interrupt_propagates(self):
        source = FakeDir(KeyboardInterrupt(), fail_on='a.txt')
        with self.assertRaises(KeyboardInterrupt):
            copier.copy_all(source, self.dest, 'a.txt, c.txt', self.display)
        self.assertEqual(['a.txt'], source.calls)

    def test_blank_entries_are_skipped(self):
        outcomes = copier.copy_all(self.source, self.dest, ' , a.txt,,',
                                   self.display)
        self.assertEqual([Copied('a.txt', 1, self.source, self.dest)],
                         outcomes)

    def test_copy_is_idempotent(self):
        shared.write_files(self.dest_dir, {'unrelated.txt': 'mine'})
        for _ in range(2):
            copier.copy_all(self.source, self.dest, 'a.txt, b', self.display)
            shared.assert_contents(self.dest_dir, {
                'a.txt': 'a',
                'b/readme.md': 'b',
                'unrelated.txt': 'mine',
            })

    def test_success_is_logged(self):
        copier.copy_all(self.source, self.dest, 'a.txt', self.display)
        self.assertEqual(
            "[copy-files] Copy file: 'a.txt' from controller: {} to worker: "
            "{}\n".format(self.source, self.dest), self.output.getvalue())
        self.assertEqual(0, self.display.error_count)

    def test_report_rejects_other_values(self):
        with self.assertRaises(TypeError):
            copier.report('not an outcome', self.display)

    def test_home_example(self):
        # Home is /ctrl, the workspace is /work/job1 on worker W.
        ctrl = shared.create_dir({'reports/summary.html': '<html/>'})
        work = shared.create_dir()
        outcomes = copier.copy_all(
            FilePath.local(os.path.join(ctrl, 'reports')),
            FilePath.local(work), 'summary.html', self.display)
        self.assertEqual(1, len(outcomes))
        self.assertIsInstance(outcomes[0], Copied)
        shared.assert_contents(work, {'summary.html': '<html/>'})
