"""Tests for kinds and kind selection."""

import pytest
from exctags_mcp.parser import (
    EXTENSIONS,
    PARSER_NAME,
    KindConfig,
    KindSpecError,
    TagKind,
    kind_table,
)


def test_kind_attributes():
    """Test each kind carries letter, label and description."""
    assert TagKind.MACRO.letter == "d"
    assert TagKind.FUNCTION.label == "function"
    assert TagKind.IMPL.letter == "l"
    assert TagKind.PROTOCOL.description == "protocol definitions"
    assert all(k.default_enabled for k in TagKind)


def test_kind_lookup():
    """Test lookups by letter and label."""
    assert TagKind.from_letter("m") is TagKind.MODULE
    assert TagKind.from_label("record") is TagKind.RECORD
    with pytest.raises(ValueError):
        TagKind.from_letter("x")


def test_default_config_enables_all():
    """Test the default config enables every kind."""
    config = KindConfig.from_spec(None)
    assert all(config.is_enabled(k) for k in TagKind)
    assert KindConfig.from_spec("").to_spec() == "dfmrpl"
    assert KindConfig.from_spec("  ").to_spec() == "dfmrpl"


def test_letter_run_enables_exactly():
    """Test a plain letter run selects exactly those kinds."""
    config = KindConfig.from_spec("fm")
    assert config.enabled == {TagKind.FUNCTION, TagKind.MODULE}


def test_plus_minus_adjusts_defaults():
    """Test +/- adjustments start from the defaults."""
    config = KindConfig.from_spec("+p-l")
    assert not config.is_enabled(TagKind.IMPL)
    assert config.is_enabled(TagKind.PROTOCOL)
    assert config.is_enabled(TagKind.MACRO)

    config = KindConfig.from_spec("-dr")
    assert config.to_spec() == "fmpl"


@pytest.mark.parametrize("spec", ["fx", "+q", "-", "+f-"])
def test_bad_specs(spec):
    """Test malformed selection strings raise KindSpecError."""
    with pytest.raises(KindSpecError):
        KindConfig.from_spec(spec)


def test_kind_table_and_registration():
    """Test parser metadata exposed to hosts."""
    assert PARSER_NAME == "Elixir"
    assert EXTENSIONS == ("ex", "exs")

    table = kind_table(KindConfig.from_spec("-l"))
    assert len(table) == 6
    assert table[0] == {"letter": "d", "name": "macro", "description": "macro definitions", "enabled": True}
    assert table[-1]["name"] == "impl"
    assert table[-1]["enabled"] is False
