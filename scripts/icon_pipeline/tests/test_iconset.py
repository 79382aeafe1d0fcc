"""
Tests for the in-memory icon set and SVG document model.
"""

import tempfile
import unittest
from pathlib import Path

from ..iconset import IconSet
from ..svg import SVG, SVGError, ViewBox, build_svg, format_number


def sample_icon_set() -> dict:
    return {
        "prefix": "test",
        "info": {"name": "Test Icons"},
        "icons": {
            "home": {"body": '<path d="M2 2h12v12H2z"/>'},
            "wide": {"body": '<path d="M0 0h24v16H0z"/>', "width": 24},
            "empty": {"body": "   "},
        },
        "aliases": {
            "house": {"parent": "home"},
            "home-rotated": {"parent": "home", "rotate": 1},
            "house-flipped": {"parent": "house", "hFlip": True},
            "orphan": {"parent": "missing"},
        },
    }


class TestViewBox(unittest.TestCase):
    """Test cases for ViewBox parsing."""

    def test_parse(self):
        self.assertEqual(ViewBox.parse("0 0 24 24"), ViewBox(0, 0, 24, 24))
        self.assertEqual(ViewBox.parse("-1,2.5, 10 20"), ViewBox(-1, 2.5, 10, 20))

    def test_str_drops_redundant_zeros(self):
        self.assertEqual(str(ViewBox(0, 0.5, 24.0, 16)), "0 0.5 24 16")

    def test_parse_invalid(self):
        for value in (None, "", "0 0 24", "a b c d", "0 0 0 24", "0 0 24 -1"):
            with self.subTest(value=value):
                with self.assertRaises(SVGError):
                    ViewBox.parse(value)

    def test_format_number(self):
        self.assertEqual(format_number(16.0), "16")
        self.assertEqual(format_number(0.25), "0.25")
        self.assertEqual(format_number(-0.0000001), "0")


class TestSVG(unittest.TestCase):
    """Test cases for the SVG document wrapper."""

    def test_build_and_extract_body(self):
        markup = build_svg('<path d="M0 0h16v16H0z"/>', ViewBox(0, 0, 16, 16))
        svg = SVG(markup)

        self.assertEqual(svg.view_box, ViewBox(0, 0, 16, 16))
        self.assertEqual(svg.root.get("width"), "16")
        self.assertTrue(svg.body().startswith("<path"))
        self.assertNotIn("xmlns", svg.body())

    def test_xlink_namespace_declared_when_used(self):
        markup = build_svg('<use xlink:href="#a"/>', ViewBox(0, 0, 16, 16))

        self.assertIn('xmlns:xlink="http://www.w3.org/1999/xlink"', markup)
        SVG(markup)

    def test_rejects_bad_markup(self):
        with self.assertRaises(SVGError):
            SVG("<svg><path></svg>")

    def test_rejects_non_svg_root(self):
        with self.assertRaises(SVGError):
            SVG('<html xmlns="http://www.w3.org/1999/xhtml"/>')


class TestIconSet(unittest.TestCase):
    """Test cases for IconSet."""

    def setUp(self):
        self.icon_set = IconSet(sample_icon_set())

    def test_entry_types(self):
        self.assertEqual(self.icon_set.entry_type("home"), "icon")
        self.assertEqual(self.icon_set.entry_type("house"), "alias")
        self.assertEqual(self.icon_set.entry_type("home-rotated"), "variation")
        self.assertEqual(self.icon_set.entry_type("house-flipped"), "variation")
        self.assertIsNone(self.icon_set.entry_type("nope"))
        self.assertEqual(self.icon_set.count(), 3)
        self.assertEqual(self.icon_set.count(("alias", "variation")), 4)
        self.assertEqual(self.icon_set.name, "Test Icons")

    def test_name_falls_back_to_prefix(self):
        self.assertEqual(IconSet({"prefix": "bare", "icons": {}}).name, "bare")

    def test_resolve_applies_defaults(self):
        data = self.icon_set.resolve("wide")

        self.assertEqual(data["width"], 24)
        self.assertEqual(data["height"], 16)
        self.assertEqual(data["left"], 0)
        self.assertEqual(data["rotate"], 0)

    def test_resolve_set_level_defaults(self):
        icon_set = IconSet({
            "prefix": "big",
            "width": 24,
            "height": 24,
            "icons": {"a": {"body": "<path d='M0 0h1v1z'/>"}},
        })

        data = icon_set.resolve("a")

        self.assertEqual((data["width"], data["height"]), (24, 24))

    def test_resolve_merges_alias_chain(self):
        data = self.icon_set.resolve("house-flipped")

        self.assertEqual(data["body"], '<path d="M2 2h12v12H2z"/>')
        self.assertTrue(data["hFlip"])
        self.assertFalse(data["vFlip"])
        self.assertNotIn("parent", data)

    def test_resolve_rotation_and_flip_combine(self):
        icon_set = IconSet({
            "prefix": "t",
            "icons": {"a": {"body": "<path d='M0 0h1v1z'/>", "rotate": 3, "hFlip": True}},
            "aliases": {"b": {"parent": "a", "rotate": 2, "hFlip": True}},
        })

        data = icon_set.resolve("b")

        self.assertEqual(data["rotate"], 1)
        self.assertFalse(data["hFlip"])

    def test_resolve_missing_or_circular(self):
        icon_set = IconSet({
            "prefix": "t",
            "icons": {},
            "aliases": {"a": {"parent": "b"}, "b": {"parent": "a"}},
        })

        self.assertIsNone(icon_set.resolve("a"))
        self.assertIsNone(self.icon_set.resolve("orphan"))
        self.assertIsNone(self.icon_set.resolve("nope"))

    def test_to_svg(self):
        svg = self.icon_set.to_svg("wide")

        self.assertEqual(svg.view_box, ViewBox(0, 0, 24, 16))
        self.assertEqual(svg.root.get("width"), "24")
        self.assertEqual(svg.root.get("height"), "16")

    def test_to_svg_rotation_swaps_dimensions(self):
        icon_set = IconSet({
            "prefix": "t",
            "icons": {"a": {"body": "<path d='M0 0h1v1z'/>", "width": 24, "height": 16, "rotate": 1}},
        })

        svg = icon_set.to_svg("a")

        self.assertEqual(svg.view_box, ViewBox(0, 0, 16, 24))
        self.assertIn("rotate(90 8 8)", svg.to_string())

    def test_to_svg_flip(self):
        svg = self.icon_set.to_svg("house-flipped")

        self.assertIn('transform="translate(16 0) scale(-1 1)"', svg.to_string())

    def test_to_svg_invalid(self):
        self.assertIsNone(self.icon_set.to_svg("empty"))
        self.assertIsNone(self.icon_set.to_svg("orphan"))
        broken = IconSet({"prefix": "t", "icons": {"a": {"body": "<path"}, "b": {"body": "<path/>", "width": 0}}})
        self.assertIsNone(broken.to_svg("a"))
        self.assertIsNone(broken.to_svg("b"))

    def test_from_svg_stores_non_default_dimensions(self):
        svg = SVG(build_svg('<path d="M0 0h4v4H0z"/>', ViewBox(0, 0, 24, 16)))

        self.icon_set.from_svg("home", svg)

        entry = self.icon_set.entries["home"]
        self.assertEqual(entry.type, "icon")
        self.assertEqual(entry.data["width"], 24)
        self.assertNotIn("height", entry.data)
        self.assertNotIn("left", entry.data)
        self.assertTrue(entry.data["body"].startswith("<path"))

    def test_remove_cascades_to_aliases(self):
        removed = self.icon_set.remove("home")

        self.assertEqual(removed, 4)
        for name in ("home", "house", "home-rotated", "house-flipped"):
            self.assertNotIn(name, self.icon_set.entries)
        self.assertIn("wide", self.icon_set.entries)
        self.assertEqual(self.icon_set.remove("home"), 0)

    def test_remove_without_aliases(self):
        self.assertEqual(self.icon_set.remove("home", remove_aliases=False), 1)
        self.assertIn("house", self.icon_set.entries)

    def test_for_each_survives_removal(self):
        visited = []

        def callback(name, entry_type):
            visited.append(name)
            if name == "home":
                self.icon_set.remove("home")

        self.icon_set.for_each(callback)

        self.assertEqual(visited, ["home", "wide", "empty", "orphan"])

    def test_for_each_filters_types(self):
        visited = []
        self.icon_set.for_each(lambda name, entry_type: visited.append(entry_type), types=("icon",))

        self.assertEqual(visited, ["icon", "icon", "icon"])

    def test_export_to_directory(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            target = Path(temp_dir) / "test"

            written = self.icon_set.export_to_directory(target)

            self.assertEqual(sorted(path.name for path in written), ["home.svg", "wide.svg"])
            self.assertEqual(sorted(path.name for path in target.iterdir()), ["home.svg", "wide.svg"])
            SVG((target / "home.svg").read_text(encoding="utf-8"))

    def test_export_with_aliases(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            written = self.icon_set.export_to_directory(Path(temp_dir), include_aliases=True)

            names = sorted(path.stem for path in written)
            self.assertEqual(names, ["home", "home-rotated", "house", "house-flipped", "wide"])

    def test_export_skips_unsafe_names(self):
        icon_set = IconSet({
            "prefix": "t",
            "icons": {
                "../escape": {"body": "<path d='M0 0h1v1z'/>"},
                ".hidden": {"body": "<path d='M0 0h1v1z'/>"},
                "ok": {"body": "<path d='M0 0h1v1z'/>"},
            },
        })

        with tempfile.TemporaryDirectory() as temp_dir:
            written = icon_set.export_to_directory(Path(temp_dir))

            self.assertEqual([path.name for path in written], ["ok.svg"])


if __name__ == '__main__':
    unittest.main()
