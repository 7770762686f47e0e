"""Unit tests for the tutor reply formatter."""

import pytest
import pytest_check as check

from src.ui.formatting import format_response, render_latex, render_tables

TABLE = (
    "Here are the results:\n"
    "| Planet | Moons | Rings |\n"
    "|--------|:-----:|-------|\n"
    "| Earth | 1 | No |\n"
    "| Mars | 2 | No |\n"
    "| Saturn | 146 | Yes |\n"
    "That is all."
)


class TestBasicFormatting:
    """Tests for bold, line breaks, headings, and bullets."""

    def test_bold_becomes_b_tags(self) -> None:
        """Double-asterisk spans become <b> elements."""
        assert format_response("A **noun** names a thing") == "A <b>noun</b> names a thing"

    def test_newlines_become_br(self) -> None:
        """Line breaks are rendered as <br/>."""
        assert format_response("one\ntwo") == "one<br/>two"

    def test_blank_line_runs_collapse(self) -> None:
        """Three or more consecutive breaks collapse to two."""
        assert format_response("one\n\n\n\n\ntwo") == "one<br/><br/>two"

    def test_surrounding_whitespace_trimmed(self) -> None:
        """Leading and trailing whitespace is removed."""
        assert format_response("\n\n  answer  \n\n") == "answer"

    def test_headings(self) -> None:
        """Markdown headings become heading elements of the same level."""
        result = format_response("# Title\n### Step 1\ntext")

        check.equal(result, "<h1>Title</h1><br/><h3>Step 1</h3><br/>text")

    def test_bullet_markers_normalized(self) -> None:
        """Dash, star and bullet markers all render as a bullet glyph."""
        result = format_response("- first\n* second\n•   third")

        check.equal(result, "• first<br/>• second<br/>• third")

    def test_bold_at_line_start_is_not_a_bullet(self) -> None:
        """A line starting with ** is bold, not a bullet."""
        assert format_response("**Key idea:** energy") == "<b>Key idea:</b> energy"

    def test_plain_text_unchanged(self) -> None:
        """Text without markup passes through."""
        assert format_response("Just a sentence.") == "Just a sentence."


class TestIdempotence:
    """Formatting already-formatted output gives the same HTML."""

    @pytest.mark.parametrize(
        "text",
        [
            "A **bold** claim",
            "# Heading\n- item with **bold**\n\n\n\nend",
            TABLE,
            r"Area is \(\pi r^2\) and \frac{1}{2} \times 4 = 2",
            "<b>already</b> converted<br/>text",
        ],
    )
    def test_format_twice_is_stable(self, text: str) -> None:
        """format_response(format_response(x)) == format_response(x)."""
        once = format_response(text)

        assert format_response(once) == once

    def test_html_bold_round_trips(self) -> None:
        """HTML bold is mapped back to markdown and rendered again."""
        assert format_response("<b>x</b> and <b>y</b>") == "<b>x</b> and <b>y</b>"


class TestTables:
    """Tests for pipe-table conversion."""

    def test_table_rows_and_columns_match(self) -> None:
        """A header plus three rows yields four <tr> and three cells per row."""
        result = format_response(TABLE)

        check.equal(result.count("<table>"), 1)
        check.equal(result.count("<tr>"), 4)
        check.equal(result.count("<th>"), 3)
        check.equal(result.count("<td>"), 9)
        check.is_in("<th>Planet</th><th>Moons</th><th>Rings</th>", result)
        check.is_in("<tr><td>Saturn</td><td>146</td><td>Yes</td></tr>", result)

    def test_surrounding_text_kept(self) -> None:
        """Text around the table stays on its own lines."""
        result = format_response(TABLE)

        check.is_true(result.startswith("Here are the results:<br/><table>"))
        check.is_true(result.endswith("</table><br/>That is all."))

    def test_ragged_table_passes_through(self) -> None:
        """A body row with the wrong column count leaves the block unchanged."""
        ragged = "| a | b |\n|---|---|\n| 1 | 2 | 3 |"

        assert render_tables(ragged) == ragged

    def test_missing_separator_is_not_a_table(self) -> None:
        """Without a separator row there is no table."""
        text = "| a | b |\n| 1 | 2 |"

        assert render_tables(text) == text

    def test_table_at_end_of_text(self) -> None:
        """A table closing the text converts without a trailing newline."""
        result = render_tables("| x | y |\n| - | - |\n| 1 | 2 |")

        assert result == (
            "<table><thead><tr><th>x</th><th>y</th></tr></thead>"
            "<tbody><tr><td>1</td><td>2</td></tr></tbody></table>"
        )

    def test_bold_inside_cells(self) -> None:
        """Bold markup inside a cell is rendered."""
        result = format_response("| term |\n|---|\n| **mass** |")

        assert "<td><b>mass</b></td>" in result


class TestLatex:
    """Tests for LaTeX escape handling."""

    def test_inline_delimiters_removed(self) -> None:
        assert render_latex(r"\(x + 1\)") == "x + 1"

    def test_display_delimiters_removed(self) -> None:
        assert render_latex(r"\[y = 2\]") == "y = 2"

    def test_fraction_and_root(self) -> None:
        check.equal(render_latex(r"\frac{3}{4}"), "3/4")
        check.equal(render_latex(r"\sqrt{16}"), "√(16)")

    def test_symbols(self) -> None:
        result = render_latex(r"2 \times 3 \div 1 \pm 1 \leq \pi \neq \infty")

        assert result == "2 × 3 ÷ 1 ± 1 ≤ π ≠ ∞"

    def test_symbol_prefix_not_replaced(self) -> None:
        """Commands that merely start with a known name are left alone."""
        assert render_latex(r"\pivot") == r"\pivot"

    def test_delimiter_produced_by_root_is_removed(self) -> None:
        """A root whose argument ends in a backslash settles in one pass."""
        once = render_latex(r"\sqrt{2\}")

        check.equal(once, "√(2")
        check.equal(render_latex(once), once)
        check.equal(format_response(format_response(r"\sqrt{2\}")), format_response(r"\sqrt{2\}"))

    def test_delimiters_hiding_a_command(self) -> None:
        assert render_latex(r"\fr\(ac{1}{2}") == "1/2"


class TestEscaping:
    """Markup the formatter does not produce is escaped."""

    def test_foreign_tags_escaped(self) -> None:
        result = format_response('see <img src=x onerror="alert(1)">')

        check.is_not_in("<img", result)
        check.equal(result, 'see &lt;img src=x onerror="alert(1)">')

    def test_attributes_on_known_tags_escaped(self) -> None:
        result = format_response('<b onclick="steal()">hi</b>')

        assert "<b onclick" not in result

    def test_script_escaped(self) -> None:
        result = format_response("<script>alert(1)</script>")

        assert "<script" not in result and "</script" not in result

    def test_less_than_in_prose(self) -> None:
        assert format_response("x < 5 and y<3") == "x &lt; 5 and y&lt;3"

    @pytest.mark.parametrize(
        "text",
        ['<img src=x onerror="alert(1)">', "if a < b then **c**", "# H\n| a |\n|---|\n| <i> |"],
    )
    def test_escaping_is_stable(self, text: str) -> None:
        once = format_response(text)

        assert format_response(once) == once
