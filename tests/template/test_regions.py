"""Tests for :mod:`sfcbridge.template.regions`."""

from __future__ import annotations

from textwrap import dedent

from sfcbridge.syntax import ScriptKind
from sfcbridge.template import (
    DEFAULT_SCRIPT,
    component_script_text,
    component_template_text,
    extract_regions,
    script_kind_for_language,
)


def test_extract_regions_finds_all_blocks(component_text: str) -> None:
    regions = extract_regions(component_text)

    assert [region.type for region in regions.regions] == [
        "template",
        "script",
        "style",
    ]
    template = regions.get("template")
    assert template is not None
    body = component_text[template.start : template.end]
    assert body.strip() == '<div class="greeting">{{ msg }}</div>'
    assert regions.language("template") == "vue-html"
    assert regions.language("script") == "javascript"
    assert regions.language("style") == "css"
    assert regions.get("style").attributes == {"scoped": ""}


def test_extract_regions_classifies_lang_attribute() -> None:
    text = (
        '<template lang="pug">div</template>\n'
        '<script lang="ts">export default {}</script>\n'
        '<style lang="scss">a {}</style>\n'
    )
    regions = extract_regions(text)

    assert regions.language("template") == "pug"
    assert regions.language("script") == "typescript"
    assert regions.language("style") == "scss"


def test_extract_regions_handles_nested_templates() -> None:
    text = (
        "<template><div><template v-if=\"ok\">x</template></div></template>"
        "<script>export default {}</script>"
    )
    regions = extract_regions(text)

    template = regions.get("template")
    assert text[template.start : template.end] == (
        '<div><template v-if="ok">x</template></div>'
    )
    assert regions.get("script") is not None


def test_extract_regions_skips_commented_blocks() -> None:
    text = "<!-- <script>nope</script> -->\n<script>yes()</script>\n"
    regions = extract_regions(text)

    script = regions.get("script")
    assert text[script.start : script.end] == "yes()"


def test_missing_regions_use_default_languages() -> None:
    regions = extract_regions("<style>a {}</style>")

    assert regions.get("template") is None
    assert regions.language("template") == "vue-html"
    assert regions.language("script") == "javascript"


def test_single_type_text_preserves_offsets(component_text: str) -> None:
    script = extract_regions(component_text).single_type_text("script")

    assert len(script) == len(component_text)
    assert script.count("\n") == component_text.count("\n")
    offset = component_text.index("export default")
    assert script[offset : offset + 14] == "export default"
    assert "<div" not in script


def test_component_script_text_falls_back_for_empty_input() -> None:
    assert component_script_text("") == DEFAULT_SCRIPT


def test_component_template_text_wraps_template(component_text: str) -> None:
    text = component_template_text(component_text)

    assert text.startswith("<template>\n")
    assert text.endswith("</template>")
    offset = component_text.index("{{ msg }}")
    assert text[offset : offset + 9] == "{{ msg }}"
    assert "export default" not in text


def test_component_template_text_skips_whitespace_templates() -> None:
    text = dedent(
        """\
        <template>
        </template>
        <script>export default {}</script>
        """
    )

    assert component_template_text(text) == ""


def test_component_template_text_skips_non_html_templates() -> None:
    assert component_template_text('<template lang="pug">div</template>') == ""


def test_script_kind_for_language() -> None:
    assert script_kind_for_language("typescript") == ScriptKind.TS
    assert script_kind_for_language("tsx") == ScriptKind.TSX
    assert script_kind_for_language("javascriptreact") == ScriptKind.JSX
    assert script_kind_for_language("javascript") == ScriptKind.JS
    assert script_kind_for_language("coffeescript") == ScriptKind.JS
