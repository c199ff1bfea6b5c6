from dataclasses import fields

import pytest

from code_settings.merge import (
    CLI_ONLY,
    CODE_MERGE_POLICY,
    GENERAL_MERGE_POLICY,
    OVERRIDE,
    merge_layers,
    merge_value,
    persisted_fields,
)
from code_settings.models import (
    CodeConfigLayer,
    ContentSource,
    GenerationSettingsLayer,
)
from code_settings.ranges import LineRange


def test_policy_tables_cover_every_field():
    assert set(CODE_MERGE_POLICY) == {f.name for f in fields(CodeConfigLayer)}
    assert set(GENERAL_MERGE_POLICY) == {
        f.name for f in fields(GenerationSettingsLayer)
    }


def test_persisted_fields_exclude_cli_only_fields():
    persisted = persisted_fields(CODE_MERGE_POLICY)

    assert persisted == {
        "theme",
        "vim_theme",
        "extra_syntaxes",
        "code_background",
        "line_numbers",
        "tab_width",
    }
    assert "copy" not in persisted_fields(GENERAL_MERGE_POLICY)


def test_explicit_override_replaces_base_value():
    merged = merge_layers(
        CodeConfigLayer(theme="a", tab_width=2),
        CodeConfigLayer(theme="b"),
        CODE_MERGE_POLICY,
    )

    assert merged.theme == "b"
    assert merged.tab_width == 2


def test_silent_override_keeps_base_value():
    merged = merge_layers(
        CodeConfigLayer(theme="a", code_background="#000000"),
        CodeConfigLayer(),
        CODE_MERGE_POLICY,
    )

    assert merged.theme == "a"
    assert merged.code_background == "#000000"


@pytest.mark.parametrize(("base", "override"), [(True, False), (False, True)])
def test_booleans_are_sticky_true(base, override):
    merged = merge_layers(
        CodeConfigLayer(line_numbers=base),
        CodeConfigLayer(line_numbers=override),
        CODE_MERGE_POLICY,
    )

    assert merged.line_numbers is True


def test_cli_only_fields_ignore_base_layer():
    merged = merge_layers(
        CodeConfigLayer(
            extension="rs", lines=LineRange(1, 2), list_themes=True
        ),
        CodeConfigLayer(content=ContentSource()),
        CODE_MERGE_POLICY,
    )

    assert merged.extension is None
    assert merged.lines is None
    assert merged.list_themes is False
    assert merged.content == ContentSource()


def test_general_layers_merge_with_extra_union():
    merged = merge_layers(
        GenerationSettingsLayer(
            background="#111111",
            shadow=True,
            extra={"show_notify": True, "keep": 1},
        ),
        GenerationSettingsLayer(padding_x=10, extra={"show_notify": False}),
        GENERAL_MERGE_POLICY,
    )

    assert merged.background == "#111111"
    assert merged.padding_x == 10
    assert merged.shadow is True
    assert merged.extra == {"show_notify": False, "keep": 1}


def test_merge_layers_requires_policy_for_every_field():
    policy = dict(CODE_MERGE_POLICY)
    del policy["theme"]

    with pytest.raises(KeyError):
        merge_layers(CodeConfigLayer(), CodeConfigLayer(), policy)


def test_merge_layers_rejects_mismatched_layers():
    with pytest.raises(TypeError):
        merge_layers(
            CodeConfigLayer(), GenerationSettingsLayer(), CODE_MERGE_POLICY
        )


def test_merge_value_handles_each_strategy():
    assert merge_value(OVERRIDE, 1, None) == 1
    assert merge_value(OVERRIDE, 1, 0) == 0
    assert merge_value(CLI_ONLY, "file", None) is None
    with pytest.raises(ValueError):
        merge_value("bogus", 1, 2)  # type: ignore[arg-type]
