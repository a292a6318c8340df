"""Tests for StyleSampler and the headless DOM's color normalization."""

from fontlens.dom.headless import HeadlessDom, normalize_css_color
from fontlens.detection.sampler import StyleSampler


# ---------------------------------------------------------------------------
# normalize_css_color
# ---------------------------------------------------------------------------

class TestNormalizeColor:
    def test_named_colors(self):
        assert normalize_css_color("red") == "rgb(255, 0, 0)"
        assert normalize_css_color("RebeccaPurple") == "rgb(102, 51, 153)"

    def test_hex_forms(self):
        assert normalize_css_color("#f00") == "rgb(255, 0, 0)"
        assert normalize_css_color("#00ff00") == "rgb(0, 255, 0)"
        assert normalize_css_color("#0000ff80") == "rgba(0, 0, 255, 0.502)"

    def test_rgb_functions(self):
        assert normalize_css_color("rgb(1,2,3)") == "rgb(1, 2, 3)"
        assert normalize_css_color("rgba(10, 20, 30, 0.5)") == "rgba(10, 20, 30, 0.5)"
        assert normalize_css_color("rgba(10, 20, 30, 1)") == "rgb(10, 20, 30)"

    def test_hsl(self):
        assert normalize_css_color("hsl(0, 100%, 50%)") == "rgb(255, 0, 0)"
        assert normalize_css_color("hsl(120deg 100% 25%)") == "rgb(0, 128, 0)"

    def test_transparent(self):
        assert normalize_css_color("transparent") == "rgba(0, 0, 0, 0)"

    def test_unparseable_is_empty(self):
        assert normalize_css_color("not-a-color") == ""
        assert normalize_css_color("") == ""


# ---------------------------------------------------------------------------
# StyleSampler
# ---------------------------------------------------------------------------

class TestStyleSampler:
    def setup_method(self):
        self.dom = HeadlessDom()
        self.sampler = StyleSampler(self.dom)

    def test_reads_resolved_typography(self):
        p = self.dom.element("p", "Hello", style={
            "font-family": '"Helvetica Neue", Arial, sans-serif',
            "font-size": "18px",
            "font-weight": "700",
            "line-height": "27px",
            "letter-spacing": "0.5px",
            "text-align": "center",
        })
        snap = self.sampler.sample(p)
        assert snap.font_family == "Helvetica Neue, Arial, sans-serif"
        assert snap.primary_family == "Helvetica Neue"
        assert snap.font_size == "18px"
        assert snap.font_weight == "700"
        assert snap.line_height == "27px"
        assert snap.letter_spacing == "0.5px"
        assert snap.text_align == "center"

    def test_inherits_from_parent(self):
        div = self.dom.element("div", style={"font-family": "Georgia", "color": "#336699"})
        span = self.dom.element("span", "Hello", parent=div)
        content = self.sampler.sample_content(span)
        assert content.style.font_family == "Georgia"
        assert content.color.hex == "#336699"

    def test_color_through_css_engine(self):
        p = self.dom.element("p", "Hello", style={"color": "hsl(0, 100%, 50%)"})
        color = self.sampler.sample_color(p)
        assert color.hex == "#ff0000"
        assert color.lch.l == 53

    def test_unparseable_color_has_no_color(self):
        p = self.dom.element("p", "Hello", style={"color": "bogus"})
        content = self.sampler.sample_content(p)
        assert content.color is None
        assert content.style is not None

    def test_non_element_yields_nothing(self):
        p = self.dom.element("p")
        text = self.dom.text(p, "Hello")
        assert self.sampler.sample(None) is None
        assert self.sampler.sample(text) is None
        assert self.sampler.sample_content(text).is_empty

    def test_detached_node_yields_nothing(self):
        p = self.dom.element("p", "Hello")
        self.dom.detach(p)
        assert self.sampler.sample(p) is None
        assert self.sampler.sample_color(p) is None

    def test_same_element_same_content_hash(self):
        p = self.dom.element("p", "Hello")
        first = self.sampler.sample_content(p)
        second = self.sampler.sample_content(p)
        assert first.content_hash == second.content_hash
        p.style["font-size"] = "20px"
        assert self.sampler.sample_content(p).content_hash != first.content_hash
