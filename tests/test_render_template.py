import pytest
from pydantic import ValidationError

from dealerdesk.render.options import PRESETS, Margins, RenderOptions
from dealerdesk.render.template import PRINT_CSS, compose, page_rule


def test_render_option_defaults() -> None:
    options = RenderOptions()

    assert options.format == "A4"
    assert options.landscape is False
    assert options.margins.as_dict() == {"top": "1cm", "right": "1cm", "bottom": "1cm", "left": "1cm"}
    assert options.scale == 1.0


def test_logs_preset_is_landscape_with_narrow_margins() -> None:
    logs = PRESETS["logs"]

    assert logs.landscape is True
    assert logs.margins == Margins(top="15mm", right="10mm", bottom="15mm", left="10mm")


def test_merged_accepts_camel_case_and_partial_margins() -> None:
    merged = PRESETS["logs"].merged({"format": "Letter", "margins": {"top": "5mm"}})

    assert merged.format == "Letter"
    assert merged.orientation == "landscape"
    assert merged.margins.top == "5mm"
    assert merged.margins.left == "10mm"
    assert PRESETS["logs"].margins.top == "15mm"


def test_merged_rejects_invalid_values() -> None:
    with pytest.raises(ValidationError):
        RenderOptions().merged({"orientation": "sideways"})
    with pytest.raises(ValidationError):
        RenderOptions().merged({"scale": 5})


def test_page_rule_matches_options() -> None:
    rule = page_rule(RenderOptions(format="Letter", orientation="landscape"))

    assert rule == "@page { size: letter landscape; margin: 1cm 1cm 1cm 1cm; }"


def test_print_css_forces_exact_colors_and_pins_grids() -> None:
    assert "print-color-adjust: exact !important" in PRINT_CSS
    assert ".lg\\:grid-cols-3" in PRINT_CSS
    assert "repeat(3, minmax(0, 1fr))" in PRINT_CSS


def test_fragment_is_wrapped() -> None:
    html = compose("<table><tr><td>Deal 7</td></tr></table>", RenderOptions(), title="Deal <7>")

    assert html.startswith("<!DOCTYPE html>\n<html>")
    assert "<title>Deal &lt;7&gt;</title>" in html
    assert "<body>\n<table><tr><td>Deal 7</td></tr></table>\n</body>" in html
    assert "<script" not in html


def test_full_document_gets_template_head_injected() -> None:
    document = (
        "<!doctype html><html lang='he' dir='rtl'><HEAD><style>h1{color:red}</style></HEAD>"
        "<body><h1>Bill</h1></body></html>"
    )

    html = compose(document, RenderOptions(), css_framework_url="https://cdn.tailwindcss.com")

    head_at = html.index("<HEAD>")
    template_at = html.index("@page")
    own_style_at = html.index("h1{color:red}")
    assert head_at < template_at < own_style_at
    assert html.count("<html") == 1
    assert "<title>" not in html
    assert "dir='rtl'" in html


def test_document_without_head_gets_one() -> None:
    html = compose("<html><body>x</body></html>", RenderOptions())

    assert html.startswith("<html>\n<head>\n")
    assert "</head><body>x</body>" in html
