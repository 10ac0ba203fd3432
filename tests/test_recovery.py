"""Tests for diagrammer.spec.recovery: strict and repaired response parsing."""

import json

import pytest

from diagrammer.spec.models import OutputKind, RecoveryError, RecoveryErrorKind
from diagrammer.spec.recovery import (
    _extract_candidate,
    _find_closing_quote,
    _strip_fences,
    recover,
)


# ---------------------------------------------------------------------------
# Fence stripping and candidate extraction
# ---------------------------------------------------------------------------


class TestCandidateExtraction:
    def test_strips_json_fence(self):
        assert _strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_bare_fence(self):
        assert _strip_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_leaves_unfenced_text(self):
        assert _strip_fences('  {"a": 1}  ') == '{"a": 1}'

    def test_takes_first_to_last_brace(self):
        raw = 'Here you go: {"a": {"b": 1}} hope that helps'
        assert _extract_candidate(raw) == '{"a": {"b": 1}}'

    def test_no_braces_raises_no_json_found(self):
        with pytest.raises(RecoveryError) as exc_info:
            recover("I could not draw that, sorry.")
        assert exc_info.value.kind is RecoveryErrorKind.no_json_found
        assert exc_info.value.raw == "I could not draw that, sorry."


# ---------------------------------------------------------------------------
# Fast path
# ---------------------------------------------------------------------------


class TestStrictPath:
    def test_well_escaped_json_matches_json_loads(self):
        payload = {
            "name": "web-app",
            "title": "Web App",
            "description": "A small web app",
            "source_code": "from diagrams import Diagram\nwith Diagram('x'):\n    pass\n",
        }
        raw = json.dumps(payload)
        spec = recover(raw)
        decoded = json.loads(raw)
        assert spec.name == decoded["name"]
        assert spec.title == decoded["title"]
        assert spec.description == decoded["description"]
        assert spec.source_code == decoded["source_code"]

    def test_fenced_response(self):
        raw = '```json\n{"name": "a", "title": "A", "source_code": "print(1)"}\n```'
        spec = recover(raw)
        assert spec.source_code == "print(1)"

    def test_unescapes_known_sequences(self):
        # the model double-escaped its newlines: the decoded code holds "\\n"
        raw = json.dumps({"name": "a", "title": "A", "source_code": "x = 1\\ny = 2"})
        spec = recover(raw)
        assert spec.source_code == "x = 1\ny = 2"

    def test_accepts_python_code_field(self):
        raw = json.dumps({"name": "a", "title": "A", "python_code": "print(1)"})
        assert recover(raw).source_code == "print(1)"

    def test_accepts_camel_case_field(self):
        raw = json.dumps({"name": "a", "title": "A", "sourceCode": "print(1)"})
        assert recover(raw).source_code == "print(1)"

    def test_style_and_quality_come_from_caller(self):
        raw = json.dumps({"name": "a", "title": "A", "source_code": "print(1)"})
        spec = recover(raw, style="aws", quality="enterprise")
        assert spec.style == "aws"
        assert spec.quality == "enterprise"

    def test_description_optional(self):
        raw = json.dumps({"name": "a", "title": "A", "source_code": "print(1)"})
        assert recover(raw).description == ""


# ---------------------------------------------------------------------------
# Repair path
# ---------------------------------------------------------------------------


class TestRepairPath:
    def test_literal_newline_and_quotes(self):
        raw = '{"name":"x","title":"T","description":"d","sourceCode":"line1\nline2"quoted""}'
        with pytest.raises(json.JSONDecodeError):
            json.loads(raw)
        spec = recover(raw)
        assert spec.source_code == 'line1\nline2"quoted"'

    def test_round_trips_raw_code(self):
        code = (
            "from diagrams import Diagram\n"
            "title = \"Web\"\n"
            "with Diagram(title, show=False):\n"
            "\tweb = Node(\"front\")\n"
        )
        raw = (
            '{"name": "web", "title": "Web", "description": "d", '
            '"source_code": "' + code + '"}'
        )
        spec = recover(raw)
        assert spec.source_code == code

    def test_code_field_not_last(self):
        code = 'print("a")\nprint("b")'
        raw = '{"name": "a", "source_code": "' + code + '", "title": "A"}'
        spec = recover(raw)
        assert spec.source_code == code
        assert spec.title == "A"

    def test_whitespace_around_marker_colon(self):
        raw = '{"name": "a", "title": "A", "source_code"  :   "x = 1\ny = 2"}'
        assert recover(raw).source_code == "x = 1\ny = 2"

    def test_quote_followed_by_text_is_content(self):
        code = 'label = "db" + "cache"\nprint(label)'
        raw = '{"name": "a", "title": "A", "source_code": "' + code + '"}'
        assert recover(raw).source_code == code

    def test_missing_marker(self):
        raw = '{"name": "a", "title": "A", "code": "x\ny"}'
        with pytest.raises(RecoveryError) as exc_info:
            recover(raw)
        assert exc_info.value.kind is RecoveryErrorKind.field_marker_not_found

    def test_unterminated_field(self):
        raw = '{"name": "a", "title": "A", "source_code": "x = 1\ny = 2}'
        with pytest.raises(RecoveryError) as exc_info:
            recover(raw)
        assert exc_info.value.kind is RecoveryErrorKind.unterminated_field

    def test_still_invalid_after_repair(self):
        # broken skeleton outside the code field
        raw = '{"name": "a" "title": "A", "source_code": "x = 1\ny = 2"}'
        with pytest.raises(RecoveryError) as exc_info:
            recover(raw)
        assert exc_info.value.kind is RecoveryErrorKind.still_invalid
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_dict_literal_at_end_is_cut_short(self):
        # known limitation: a quote followed by "}" inside the code ends the field
        code = 'cfg = {"a": "b"}\nprint(cfg)'
        raw = '{"name": "a", "title": "A", "source_code": "' + code + '"}'
        with pytest.raises(RecoveryError) as exc_info:
            recover(raw)
        assert exc_info.value.kind is RecoveryErrorKind.still_invalid


class TestFindClosingQuote:
    def test_skips_escaped_quote(self):
        text = 'a \\" b", "x": 1}'
        assert _find_closing_quote(text) == text.index('",')

    def test_accepts_quote_before_brace_after_whitespace(self):
        text = 'abc"   \n }'
        assert _find_closing_quote(text) == 3

    def test_none_when_no_terminator(self):
        assert _find_closing_quote('abc "def" ghi') is None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    @pytest.mark.parametrize("missing", ["name", "title", "source_code"])
    def test_missing_required_field(self, missing):
        payload = {"name": "a", "title": "A", "source_code": "print(1)"}
        del payload[missing]
        with pytest.raises(RecoveryError) as exc_info:
            recover(json.dumps(payload))
        assert exc_info.value.kind is RecoveryErrorKind.missing_field
        assert missing in str(exc_info.value)

    def test_blank_title_is_missing(self):
        raw = json.dumps({"name": "a", "title": "  ", "source_code": "print(1)"})
        with pytest.raises(RecoveryError) as exc_info:
            recover(raw)
        assert exc_info.value.kind is RecoveryErrorKind.missing_field

    def test_unsafe_name_is_slugified(self):
        raw = json.dumps({"name": "../etc/My Diagram!", "title": "A", "source_code": "print(1)"})
        assert recover(raw).name == "etc-My-Diagram"

    def test_infers_markup_kind(self):
        raw = json.dumps({
            "name": "seq",
            "title": "Seq",
            "source_code": "@startuml\nA -> B\n@enduml",
        })
        assert recover(raw).output_kind is OutputKind.markup

    def test_declared_kind_must_match_content(self):
        raw = json.dumps({"name": "a", "title": "A", "source_code": "print(1)"})
        with pytest.raises(RecoveryError) as exc_info:
            recover(raw, output_kind=OutputKind.markup)
        assert exc_info.value.kind is RecoveryErrorKind.still_invalid
