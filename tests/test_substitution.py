# tests/test_substitution.py
"""Tests for workflow variable substitution."""
import pytest

from qalam.workflows.substitution import merge_variables, substitute_variables, find_unresolved


def test_braced_placeholder_replaced():
    assert substitute_variables("echo build:${env}", {"env": "staging"}) == "echo build:staging"


def test_bare_placeholder_replaced():
    assert substitute_variables("echo $env", {"env": "staging"}) == "echo staging"


def test_every_occurrence_replaced():
    result = substitute_variables("${x}-$x-${x}/$x", {"x": "v"})

    assert result == "v-v-v/v"
    assert "${x}" not in result
    assert "$x" not in result


def test_both_syntaxes_in_one_command():
    result = substitute_variables("deploy ${app} && notify $app", {"app": "api"})
    assert result == "deploy api && notify api"


def test_multiple_variables():
    result = substitute_variables(
        "kubectl -n ${ns} rollout restart deploy/${app}",
        {"ns": "prod", "app": "web"}
    )
    assert result == "kubectl -n prod rollout restart deploy/web"


def test_missing_variable_passes_through():
    template = "echo ${missing} and ${env}"
    assert substitute_variables(template, {"env": "dev"}) == "echo ${missing} and dev"


def test_shell_variables_untouched():
    assert substitute_variables("echo $HOME ${USER}", {"env": "dev"}) == "echo $HOME ${USER}"


def test_inserted_value_is_not_substituted_again():
    result = substitute_variables("export P=${path}", {"path": "$path:/opt/bin"})
    assert result == "export P=$path:/opt/bin"


def test_value_with_backslashes_is_inserted_literally():
    assert substitute_variables("echo ${re}", {"re": r"\d+\1"}) == r"echo \d+\1"


def test_dollar_prefixed_key_is_accepted():
    assert substitute_variables("echo ${name}", {"$name": "qalam"}) == "echo qalam"


def test_non_string_values_are_converted():
    assert substitute_variables("sleep ${n}", {"n": 3}) == "sleep 3"


def test_substitution_is_idempotent():
    variables = {"env": "prod", "region": "eu"}
    once = substitute_variables("deploy ${env} to $region", variables)
    twice = substitute_variables(once, variables)

    assert once == "deploy prod to eu"
    assert twice == once


def test_empty_mapping_returns_template():
    assert substitute_variables("echo ${a} $b", {}) == "echo ${a} $b"


def test_merge_overrides_defaults():
    merged = merge_variables({"env": "staging", "region": "eu"}, {"env": "production"})
    assert merged == {"env": "production", "region": "eu"}


def test_merge_does_not_mutate_inputs():
    defaults = {"env": "staging"}
    overrides = {"env": "production", "tag": "v1"}

    merged = merge_variables(defaults, overrides)
    merged["extra"] = "x"

    assert defaults == {"env": "staging"}
    assert overrides == {"env": "production", "tag": "v1"}


@pytest.mark.parametrize("defaults, overrides", [(None, None), ({}, None), (None, {})])
def test_merge_handles_missing_maps(defaults, overrides):
    assert merge_variables(defaults, overrides) == {}


def test_find_unresolved_lists_braced_placeholders_once():
    assert find_unresolved("echo ${a} ${b} ${a} $c") == ["a", "b"]


def test_find_unresolved_empty_when_resolved():
    assert find_unresolved("echo done") == []
