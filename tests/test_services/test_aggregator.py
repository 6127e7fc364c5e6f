from __future__ import annotations

from actions_indicators.schemas.workflow import WorkflowSummary
from actions_indicators.services.aggregator import aggregate, extract_details

SCHEDULED_AND_MANUAL = "on:\n  workflow_dispatch:\n  schedule:\n    - cron: '30 5 * * 1'"


def test_scenario_disabled_manual_and_scheduled():
    composed = aggregate(
        [WorkflowSummary(name="ci.yml", is_enabled=False)],
        {"ci.yml": SCHEDULED_AND_MANUAL},
    )
    workflow = composed["ci.yml"]
    assert workflow.is_enabled is False
    assert workflow.schedule == "30 5 * * 1"
    assert workflow.manually_dispatchable is True


def test_join_keeps_only_names_present_on_both_sides():
    summaries = [
        WorkflowSummary(name="ci.yml", is_enabled=True),
        WorkflowSummary(name="deleted.yml", is_enabled=True),
    ]
    definitions = {
        "ci.yml": "on: push\n",
        "draft.yml": "on: push\n",
    }
    composed = aggregate(summaries, definitions)
    assert set(composed) == {"ci.yml"}


def test_empty_name_from_malformed_path_is_dropped():
    composed = aggregate(
        [WorkflowSummary(name="", is_enabled=True)],
        {"ci.yml": SCHEDULED_AND_MANUAL},
    )
    assert composed == {}


def test_empty_inputs_yield_empty_mapping():
    assert aggregate([], {}) == {}
    assert aggregate([WorkflowSummary(name="ci.yml", is_enabled=True)], {}) == {}


def test_double_quoted_cron():
    details = extract_details('on:\n  schedule:\n    - cron: "0 0 * * *"\n')
    assert details.schedule == "0 0 * * *"


def test_bare_cron_without_quotes():
    details = extract_details("on:\n  schedule:\n  - cron: 15 */6 * * *\n  push:\n")
    assert details.schedule == "15 */6 * * *"


def test_cron_match_is_case_insensitive():
    details = extract_details("on:\n  Schedule:\n    - Cron: '0 12 * * 0'\n")
    assert details.schedule == "0 12 * * 0"


def test_crlf_line_endings_do_not_leak_into_schedule():
    details = extract_details("on:\r\n  schedule:\r\n    - cron: 0 3 * * *\r\n")
    assert details.schedule == "0 3 * * *"


def test_first_cron_wins():
    text = "on:\n  schedule:\n    - cron: '0 1 * * *'\n    - cron: '0 2 * * *'\n"
    assert extract_details(text).schedule == "0 1 * * *"


def test_no_cron_key_means_no_schedule():
    details = extract_details("on:\n  push:\n    branches: [main]\n")
    assert details.schedule is None
    assert details.manually_dispatchable is False


def test_malformed_cron_is_kept_verbatim():
    details = extract_details("on:\n  schedule:\n    - cron: 'every tuesday'\n")
    assert details.schedule == "every tuesday"


def test_dispatch_marker_regardless_of_indentation():
    assert extract_details("on:\n        workflow_dispatch:\n").manually_dispatchable is True
    assert extract_details("on:\n\tworkflow_dispatch:\n    inputs: {}\n").manually_dispatchable is True


def test_dispatch_requires_literal_colon():
    assert extract_details("on: [push, workflow_dispatch]\n").manually_dispatchable is False
