"""Tests for the input and result records."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from buddy_run.models.inputs import PipelineInputs
from buddy_run.models.results import ActionResult, PipelineOutputs

REQUIRED = {"workspace": "w", "project": "p", "identifier": "id"}


def test_inputs_load_by_alias_or_name():
    by_alias = PipelineInputs.model_validate({**REQUIRED, "pull-request": "7", "clear-cache": True})
    by_name = PipelineInputs(**REQUIRED, pull_request="7", clear_cache=True)
    assert by_alias == by_name
    assert by_alias.pull_request == "7"


def test_unknown_fields_ignored():
    inputs = PipelineInputs.model_validate({**REQUIRED, "github-token": "x"})
    assert not hasattr(inputs, "github_token")


def test_inputs_frozen():
    inputs = PipelineInputs(**REQUIRED)
    with pytest.raises(ValidationError):
        inputs.branch = "main"


def test_to_dict_drops_unset_optionals():
    result = ActionResult(outputs=PipelineOutputs(run_url="https://app.buddy.works/r/1"))
    assert result.to_dict() == {
        "exit_code": 0,
        "message": "",
        "outputs": {"run_url": "https://app.buddy.works/r/1"},
    }
    assert PipelineOutputs().to_dict() == {}
