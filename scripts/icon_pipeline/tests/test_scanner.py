"""
Tests for provider and SVG file discovery.
"""

import tempfile
from pathlib import Path

from ..scanner import list_providers, walk_svg_files, get_all_svg_files


class TestScanner:
    """Test scanning the normalized SVG tree."""

    def setup_method(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def teardown_method(self):
        self.temp_dir.cleanup()

    def touch(self, relative: str):
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("<svg/>")
        return path

    def test_list_providers_sorted(self):
        self.touch("tabler/a.svg")
        self.touch("mdi/a.svg")
        (self.root / "empty").mkdir()
        self.touch("README.txt")

        assert list_providers(self.root) == ["empty", "mdi", "tabler"]

    def test_list_providers_missing_root(self):
        assert list_providers(self.root / "missing") == []

    def test_walk_is_depth_first_in_name_order(self):
        self.touch("mdi/b.svg")
        self.touch("mdi/a/z.svg")
        self.touch("mdi/a.svg")
        self.touch("mdi/c/d.svg")
        self.touch("mdi/notes.txt")

        files = [path.relative_to(self.root / "mdi").as_posix() for path in walk_svg_files(self.root / "mdi")]

        assert files == ["a/z.svg", "a.svg", "b.svg", "c/d.svg"]

    def test_walk_is_lazy_and_restartable(self):
        self.touch("mdi/a.svg")
        self.touch("mdi/b.svg")

        walker = walk_svg_files(self.root / "mdi")
        assert next(walker).name == "a.svg"

        assert [path.name for path in walk_svg_files(self.root / "mdi")] == ["a.svg", "b.svg"]

    def test_get_all_svg_files_empty_provider(self):
        (self.root / "empty").mkdir()

        assert get_all_svg_files(self.root / "empty") == []
