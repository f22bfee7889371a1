import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from snap_vcs.errors import SnapshotExistsError, SnapshotNotFoundError, StorageError
from snap_vcs.store.commit_store import CommitStore
from snap_vcs.store.hasher import EMPTY_FINGERPRINT, fingerprint


class TestCommitStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.work_tree = Path(self._tmp.name)
        self.commits_dir = self.work_tree / "vcs" / "commits"
        self.commits_dir.mkdir(parents=True)
        self.store = CommitStore(self.commits_dir, self.work_tree)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, content: bytes) -> None:
        path = self.work_tree / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def test_fingerprint_concatenates_in_index_order(self) -> None:
        self._write("a.txt", b"hello")
        self._write("b.txt", b"world")
        self.assertEqual(self.store.compute_fingerprint(["a.txt", "b.txt"]), fingerprint(b"helloworld"))
        self.assertEqual(self.store.compute_fingerprint(["b.txt", "a.txt"]), fingerprint(b"worldhello"))

    def test_fingerprint_ignores_paths(self) -> None:
        self._write("a.txt", b"hello")
        self._write("other.txt", b"hello")
        self.assertEqual(
            self.store.compute_fingerprint(["a.txt"]),
            self.store.compute_fingerprint(["other.txt"]),
        )

    def test_fingerprint_of_nothing_is_empty_fingerprint(self) -> None:
        self.assertEqual(self.store.compute_fingerprint([]), EMPTY_FINGERPRINT)

    def test_fingerprint_missing_file_raises(self) -> None:
        self._write("a.txt", b"hello")
        with self.assertRaises(StorageError):
            self.store.compute_fingerprint(["a.txt", "gone.txt"])

    def test_store_and_retrieve(self) -> None:
        self._write("a.txt", b"hello")
        self._write("docs/b.bin", b"\x00\x01\x02")
        fp = self.store.compute_fingerprint(["a.txt", "docs/b.bin"])
        self.assertFalse(self.store.exists(fp))

        self.store.store(fp, ["a.txt", "docs/b.bin"])

        self.assertTrue(self.store.exists(fp))
        self.assertEqual(self.store.fingerprints(), [fp])
        self.assertEqual(
            self.store.retrieve(fp),
            {"a.txt": b"hello", "docs/b.bin": b"\x00\x01\x02"},
        )
        self.assertEqual((self.commits_dir / fp / "a.txt").read_bytes(), b"hello")

    def test_snapshot_is_independent_of_later_edits(self) -> None:
        self._write("a.txt", b"hello")
        fp = self.store.compute_fingerprint(["a.txt"])
        self.store.store(fp, ["a.txt"])
        self._write("a.txt", b"changed")
        self.assertEqual(self.store.retrieve(fp), {"a.txt": b"hello"})

    def test_empty_snapshot(self) -> None:
        self.store.store(EMPTY_FINGERPRINT, [])
        self.assertTrue(self.store.exists(EMPTY_FINGERPRINT))
        self.assertEqual(self.store.retrieve(EMPTY_FINGERPRINT), {})

    def test_store_twice_raises(self) -> None:
        self._write("a.txt", b"hello")
        fp = self.store.compute_fingerprint(["a.txt"])
        self.store.store(fp, ["a.txt"])
        with self.assertRaises(SnapshotExistsError):
            self.store.store(fp, ["a.txt"])

    def test_retrieve_unknown_raises(self) -> None:
        with self.assertRaises(SnapshotNotFoundError):
            self.store.retrieve(fingerprint(b"never stored"))
        with self.assertRaises(SnapshotNotFoundError):
            self.store.retrieve("..")

    def test_exists_rejects_non_fingerprints(self) -> None:
        self.assertFalse(self.store.exists(".."))
        self.assertFalse(self.store.exists(""))

    def test_failed_copy_removes_partial_snapshot(self) -> None:
        self._write("a.txt", b"hello")
        self._write("b.txt", b"world")
        fp = self.store.compute_fingerprint(["a.txt", "b.txt"])
        real_copy = shutil.copyfile
        calls = []

        def flaky_copy(src, dst):
            calls.append(src)
            if len(calls) == 2:
                raise OSError("disk full")
            return real_copy(src, dst)

        with patch("snap_vcs.store.commit_store.shutil.copyfile", side_effect=flaky_copy):
            with self.assertRaises(StorageError):
                self.store.store(fp, ["a.txt", "b.txt"])
        self.assertFalse(self.store.exists(fp))
        self.assertEqual(self.store.fingerprints(), [])


if __name__ == "__main__":
    unittest.main()
