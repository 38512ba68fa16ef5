"""Tests for reading rule definitions."""

import pytest

from subrules.core.exceptions import RuleFileError
from subrules.core.models import RuleDefinition
from subrules.rules.definitions import (
    load_definitions,
    parse_definition_line,
    read_definitions,
)


class TestParseDefinitionLine:
    """Tests for parse_definition_line()."""

    @pytest.mark.parametrize(
        "line",
        [
            "hisFull means hisG and hisI",
            "hisFull if hisG and hisI",
            "hisFull is hisG and hisI",
            "hisFull hisG and hisI",
            "  hisFull   means   hisG and hisI\n",
        ],
    )
    def test_connectors(self, line):
        """The connector word is optional."""
        definition = parse_definition_line(line)
        assert definition.name == "hisFull"
        assert definition.text == "hisG and hisI"

    def test_skip_lines(self):
        """Blank and comment lines have no definition."""
        assert parse_definition_line("") is None
        assert parse_definition_line("   \n") is None
        assert parse_definition_line("# active means hisG") is None

    def test_name_only(self):
        with pytest.raises(RuleFileError) as excinfo:
            parse_definition_line("lonely", 7, "checkvariant_rules")
        assert excinfo.value.line_number == 7
        assert "checkvariant_rules, line 7" in str(excinfo.value)

    def test_str(self):
        definition = RuleDefinition(name="x", text="a or b")
        assert str(definition) == "x means a or b"


class TestReadDefinitions:
    """Tests for reading whole files."""

    def test_read_lines(self):
        lines = ["# header", "a means x", "", "b if x and y"]
        definitions = list(read_definitions(lines))
        assert [d.name for d in definitions] == ["a", "b"]
        assert [d.line_number for d in definitions] == [2, 4]

    def test_load_file(self, tmp_path):
        path = tmp_path / "checkvariant_definitions"
        path.write_text("core means hisG and hisI\n\n# note\nany means hisG or hisI\n")
        definitions = load_definitions(path)
        assert [d.name for d in definitions] == ["core", "any"]
        assert definitions[1].text == "hisG or hisI"

    def test_missing_file(self, tmp_path):
        """A subsystem without a rules file has no rules."""
        assert load_definitions(tmp_path / "checkvariant_rules") == []
