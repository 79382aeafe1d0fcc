"""
Tests for SVG size optimization.
"""

import re
import unittest

from ..processing.optimize import optimize_svg
from ..processing.scouring import PIN_ATTRIBUTE
from ..svg import SVG, SVG_NS, local_name


def make_svg(body: str) -> SVG:
    return SVG(f'<svg xmlns="{SVG_NS}" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 24 24">{body}</svg>')


def find_all(svg: SVG, tag: str):
    return list(svg.root.iter(f"{{{SVG_NS}}}{tag}"))


class TestOptimizeSVG(unittest.TestCase):
    """Test cases for optimize_svg."""

    def test_strips_whitespace_but_not_text(self):
        svg = make_svg('\n  <path d="M0 0h4v4H0z"/>\n  <text x="0" y="10"> A  B </text>\n')

        optimize_svg(svg)

        self.assertIsNone(svg.root.text)
        self.assertIsNone(svg.root[0].tail)
        self.assertIn("A", find_all(svg, "text")[0].text)
        self.assertIn("B", find_all(svg, "text")[0].text)

    def test_removes_unused_ids(self):
        svg = make_svg(
            '<defs><linearGradient id="used"><stop offset="0"/></linearGradient></defs>'
            '<path id="unused" d="M0 0h4v4H0z" fill="url(#used)"/>'
            '<path id="target" d="M1 1h4v4H1z"/><use xlink:href="#target"/>'
        )

        optimize_svg(svg)

        markup = svg.to_string()
        self.assertIn('id="used"', markup)
        self.assertIn('id="target"', markup)
        self.assertNotIn('id="unused"', markup)

    def test_removes_default_attributes(self):
        svg = make_svg(
            '<path d="M0 0h4v4H0z" opacity="1" fill-opacity="1" stroke-width="1" stroke-linecap="round"/>'
        )

        optimize_svg(svg)

        path = find_all(svg, "path")[0]
        self.assertIsNone(path.get("opacity"))
        self.assertIsNone(path.get("fill-opacity"))
        self.assertIsNone(path.get("stroke-width"))
        self.assertEqual(path.get("stroke-linecap"), "round")

    def test_keeps_defaults_that_override_ancestors(self):
        svg = make_svg(
            '<g stroke-width="2"><path d="M0 0h4v4H0z" stroke-width="1"/><path d="M1 1h4v4H1z"/></g>'
        )

        optimize_svg(svg)

        group = find_all(svg, "g")[0]
        self.assertEqual(group.get("stroke-width"), "2")
        self.assertEqual(find_all(svg, "path")[0].get("stroke-width"), "1")

    def test_keeps_inherited_defaults_in_referenced_content(self):
        svg = make_svg(
            '<symbol id="s"><path d="M0 0h4v4H0z" fill-rule="nonzero"/></symbol><use xlink:href="#s"/>'
        )

        optimize_svg(svg)

        self.assertEqual(find_all(svg, "symbol")[0][0].get("fill-rule"), "nonzero")

    def test_referenced_element_keeps_default_stroke_width(self):
        """A default on a <use> target still overrides what the <use> element passes down."""
        svg = make_svg(
            '<path id="p" stroke-width="1" fill="none" stroke="#000" d="M2 2h8v8H2z"/>'
            '<use xlink:href="#p" stroke-width="3"/>'
        )

        optimize_svg(svg)

        path = find_all(svg, "path")[0]
        use = find_all(svg, "use")[0]
        self.assertEqual(path.get("id"), "p")
        self.assertEqual(path.get("stroke-width"), "1")
        self.assertEqual(use.get("stroke-width"), "3")
        self.assertNotIn(PIN_ATTRIBUTE, svg.to_string())

    def test_collapses_groups(self):
        svg = make_svg(
            '<g><g><path d="M0 0h4v4H0z"/></g><path d="M1 1h4v4H1z"/></g>'
            '<g fill="#fff"><path d="M2 2h4v4H2z"/></g>'
            '<g/><defs/>'
        )

        optimize_svg(svg)

        self.assertEqual(len(find_all(svg, "path")), 3)
        self.assertEqual(find_all(svg, "defs"), [])
        for group in find_all(svg, "g"):
            self.assertTrue(group.attrib)
            self.assertTrue(len(group))
        white = [el for el in svg.root.iter() if el.get("fill") == "#fff"]
        self.assertEqual(len(white), 1)

    def test_shortens_colors_and_numbers(self):
        svg = make_svg('<polygon points="0.50,  1.000 2 3 4 0" fill="#FFFFFF" stroke="#123456"/>')

        optimize_svg(svg)

        polygon = find_all(svg, "polygon")[0]
        numbers = [float(n) for n in re.findall(r'-?\d*\.?\d+', polygon.get("points"))]
        self.assertEqual(numbers, [0.5, 1, 2, 3, 4, 0])
        self.assertNotIn("0.50", polygon.get("points"))
        self.assertNotIn("1.000", polygon.get("points"))
        self.assertEqual(polygon.get("fill"), "#fff")
        self.assertEqual(polygon.get("stroke"), "#123456")

    def test_path_data_is_compacted(self):
        verbose = "M 10.50 20.00 L 30 , 40 L 10.50 40.00 Z"
        svg = make_svg(f'<path d="{verbose}"/>')

        optimize_svg(svg)

        compacted = find_all(svg, "path")[0].get("d")
        self.assertLess(len(compacted), len(verbose))
        self.assertNotIn("10.50", compacted)
        self.assertNotIn("20.00", compacted)

    def test_only_svg_elements_remain(self):
        svg = make_svg('<g><path d="M0 0h4v4H0z"/></g><circle cx="5" cy="5" r="2"/>')

        optimize_svg(svg)

        self.assertEqual(
            sorted(local_name(el.tag) for el in svg.root.iter()), ["circle", "path", "svg"]
        )

    def test_idempotent(self):
        svg = make_svg(
            '<g><g opacity="1"><path d="M 0.50 0 L 10 , 10 L 0 10 z" fill="#FFFFFF"/></g></g>'
            '<g fill="none" stroke="#000" stroke-width="2"><circle cx="5.0" cy="5" r="2"/></g>'
        )

        optimize_svg(svg)
        once = svg.to_string()
        optimize_svg(svg)

        self.assertEqual(svg.to_string(), once)


if __name__ == '__main__':
    unittest.main()
