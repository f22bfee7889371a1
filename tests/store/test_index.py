import tempfile
import unittest
from pathlib import Path

from snap_vcs.store.index import AddStatus, TrackedFileIndex


class TestTrackedFileIndex(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.work_tree = Path(self._tmp.name).resolve()
        (self.work_tree / "vcs").mkdir()
        self.index_file = self.work_tree / "vcs" / "index.txt"
        self.index = TrackedFileIndex(self.index_file, self.work_tree)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, content: str = "x") -> None:
        path = self.work_tree / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    def test_empty_index_lists_nothing(self) -> None:
        self.assertEqual(self.index.list(), [])
        self.assertEqual(len(self.index), 0)

    def test_add_existing_file_persists_immediately(self) -> None:
        self._write("a.txt")
        result = self.index.add("a.txt")
        self.assertEqual(result.status, AddStatus.ADDED)
        self.assertTrue(result.ok)
        self.assertEqual(self.index_file.read_text(), "a.txt\n")
        # A fresh instance sees the same state.
        self.assertEqual(TrackedFileIndex(self.index_file, self.work_tree).list(), ["a.txt"])

    def test_add_missing_file_does_not_mutate_index(self) -> None:
        self._write("a.txt")
        self.index.add("a.txt")
        before = self.index_file.read_text()
        result = self.index.add("missing.txt")
        self.assertEqual(result.status, AddStatus.NOT_FOUND)
        self.assertFalse(result.ok)
        self.assertEqual(result.path, "missing.txt")
        self.assertEqual(self.index_file.read_text(), before)

    def test_add_directory_is_not_found(self) -> None:
        (self.work_tree / "subdir").mkdir()
        self.assertEqual(self.index.add("subdir").status, AddStatus.NOT_FOUND)
        self.assertEqual(self.index.list(), [])

    def test_readd_is_noop_success(self) -> None:
        self._write("a.txt")
        self.index.add("a.txt")
        result = self.index.add("./a.txt")
        self.assertEqual(result.status, AddStatus.ALREADY_TRACKED)
        self.assertTrue(result.ok)
        self.assertEqual(self.index.list(), ["a.txt"])
        self.assertEqual(self.index_file.read_text(), "a.txt\n")

    def test_insertion_order_preserved(self) -> None:
        for name in ["c.txt", "a.txt", "b/d.txt"]:
            self._write(name)
            self.index.add(name)
        self.assertEqual(self.index.list(), ["c.txt", "a.txt", "b/d.txt"])
        self.assertEqual(list(self.index), ["c.txt", "a.txt", "b/d.txt"])

    def test_absolute_path_inside_work_tree_is_normalized(self) -> None:
        self._write("a.txt")
        result = self.index.add(self.work_tree / "a.txt")
        self.assertEqual(result.status, AddStatus.ADDED)
        self.assertEqual(result.path, "a.txt")
        self.assertIn("a.txt", self.index)

    def test_path_outside_work_tree_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as other:
            outside = Path(other) / "x.txt"
            outside.write_text("x")
            result = self.index.add(outside)
        self.assertEqual(result.status, AddStatus.OUTSIDE_WORK_TREE)
        self.assertEqual(self.index.add("../x.txt").status, AddStatus.OUTSIDE_WORK_TREE)
        self.assertEqual(self.index.list(), [])

    def test_legacy_duplicates_are_collapsed(self) -> None:
        self.index_file.write_text("a.txt\nb.txt\na.txt\n\n")
        self.assertEqual(self.index.list(), ["a.txt", "b.txt"])

    def test_surrounding_spaces_in_names_are_kept(self) -> None:
        self._write(" a.txt ")
        self.assertEqual(self.index.add(" a.txt ").status, AddStatus.ADDED)
        self.assertEqual(self.index.list(), [" a.txt "])
        self.assertIn(" a.txt ", self.index)

    def test_crlf_line_endings_are_read(self) -> None:
        self.index_file.write_bytes(b"a.txt\r\nb.txt\r\n")
        self.assertEqual(self.index.list(), ["a.txt", "b.txt"])

    def test_storage_root_paths_are_rejected(self) -> None:
        index = TrackedFileIndex(self.index_file, self.work_tree, self.work_tree / "vcs")
        self._write("vcs/log.txt")
        self._write("vcsnotes.txt")
        for path in ("vcs/log.txt", "vcs/index.txt", "./vcs/../vcs/log.txt", self.work_tree / "vcs" / "log.txt"):
            result = index.add(path)
            self.assertEqual(result.status, AddStatus.INSIDE_STORAGE_ROOT)
            self.assertFalse(result.ok)
        self.assertEqual(index.list(), [])
        self.assertEqual(index.add("vcsnotes.txt").status, AddStatus.ADDED)

    def test_storage_root_outside_work_tree_restricts_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as other:
            index = TrackedFileIndex(self.index_file, self.work_tree, Path(other))
            self._write("a.txt")
            self.assertEqual(index.add("a.txt").status, AddStatus.ADDED)


if __name__ == "__main__":
    unittest.main()
