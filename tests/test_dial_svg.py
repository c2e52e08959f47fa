"""Tests for the live dial SVG."""

import xml.etree.ElementTree as ET

from autocall_logo.models import RenderOptions
from autocall_logo.output.dial_svg import render_dial_svg

SVG_NS = "{http://www.w3.org/2000/svg}"


class TestRenderDialSvg:
    def test_well_formed(self, sample_plan):
        root = ET.fromstring(render_dial_svg(sample_plan))
        assert root.tag == f"{SVG_NS}svg"
        assert root.get("viewBox") == "0 0 512 800"
        assert root.get("role") == "img"
        assert "10.0% performance" in root.get("aria-label")

    def test_size(self, sample_plan):
        root = ET.fromstring(render_dial_svg(sample_plan, RenderOptions(size=256)))
        assert root.get("width") == "256"
        assert root.get("height") == "299.52"

    def test_default_size(self, sample_plan):
        root = ET.fromstring(render_dial_svg(sample_plan))
        assert root.get("width") == "512"
        assert root.get("height") == "599.04"

    def test_animated_by_default(self, sample_plan):
        svg = render_dial_svg(sample_plan)
        assert svg.count("<animateTransform") == 1
        assert 'dur="315360000s"' in svg

    def test_animation_off(self, sample_plan):
        assert "animateTransform" not in render_dial_svg(sample_plan, RenderOptions(animate=False))

    def test_called_plan_not_animated(self, called_plan):
        svg = render_dial_svg(called_plan)
        assert "animateTransform" not in svg
        assert "Called: 2025-06-16" in svg

    def test_observation_markers(self, sample_plan):
        svg = render_dial_svg(sample_plan)
        assert svg.count('fill="url(#finalObsGradient)"') == 1
        # 2027 and 2028 are upcoming; 2033 is the final one
        assert svg.count('fill="#87CEEB"') == 2

    def test_level_arrows(self, sample_plan):
        svg = render_dial_svg(sample_plan)
        assert 'stroke="#0A5C2F"' in svg
        assert 'fill="#FFFFFF" stroke="#007A3A"' in svg

    def test_no_next_observation_arrow(self, sample_plan):
        plan = sample_plan.model_copy(update={"observations": []})
        assert 'stroke="#0A5C2F"' not in render_dial_svg(plan)

    def test_pointer_rotation(self, sample_plan):
        assert '<g transform="rotate(51.6, 256, 256)">' in render_dial_svg(sample_plan)

    def test_barrier_triangle(self, sample_plan):
        assert 'fill="#FFA000"' in render_dial_svg(sample_plan)

    def test_bottom_arrow_colour(self, sample_plan):
        plan = sample_plan.model_copy(update={"bottom_arrow_color": "hsl(10, 70%, 50%)"})
        assert 'fill="hsl(10, 70%, 50%)"' in render_dial_svg(plan)

    def test_circle_fill(self, sample_plan):
        plan = sample_plan.model_copy(update={"circle_fill": "#ABCDEF"})
        assert 'fill="#ABCDEF"' in render_dial_svg(plan)

    def test_wordmark(self, sample_plan):
        svg = render_dial_svg(sample_plan)
        assert ">Autocalls</tspan>" in svg
        assert ">.uk</tspan>" in svg

    def test_debug_overlays(self, sample_plan):
        plain = render_dial_svg(sample_plan)
        debug = render_dial_svg(sample_plan, RenderOptions(debug=True))
        for text in (">NOW<", "Outer Segment Calculation", ">Y1<", "Total Days: 3653"):
            assert text not in plain
            assert text in debug
        ET.fromstring(debug)

    def test_escaping(self, sample_plan):
        plan = sample_plan.model_copy(update={"counterparty": "<Bank & Co>"})
        svg = render_dial_svg(plan)
        ET.fromstring(svg)
        assert "&lt;Bank &amp; Co&gt;" in svg

    def test_pure(self, sample_plan):
        options = RenderOptions(debug=True)
        assert render_dial_svg(sample_plan, options) == render_dial_svg(sample_plan, options)

    def test_brand_colours_escaped(self, sample_plan):
        colours = sample_plan.brand_colours.model_copy(update={
            "navy": 'red" onload="x', "green_primary": "<green>",
        })
        plan = sample_plan.model_copy(update={"brand_colours": colours})
        svg = render_dial_svg(plan, RenderOptions(debug=True))
        ET.fromstring(svg)
        assert 'red&quot; onload=&quot;x' in svg
        assert "&lt;green&gt;" in svg
