import asyncio

import pytest

from branch_sales.data_handler import LoadFailure, load_branches
from branch_sales.schemas import BranchDataset
from branch_sales.view import FAILED, IDLE, READY, ViewState


def _loader_for(documents):
    async def loader():
        return {b: BranchDataset.model_validate(d) for b, d in documents.items()}

    return loader


async def _failing_loader():
    raise LoadFailure("Unexpected token < in JSON", branch="branch2")


@pytest.fixture
def ready_view(branch_documents, collator, formatter):
    view = ViewState(collator=collator, formatter=formatter, loader=_loader_for(branch_documents))
    asyncio.run(view.load())
    return view


def test_initial_state(collator, formatter):
    view = ViewState(collator=collator, formatter=formatter)
    assert view.status == IDLE
    assert view.loading is False
    assert view.error is None
    assert view.query == ""
    assert view.datasets == {"branch1": None, "branch2": None, "branch3": None}


def test_loading_flag_set_while_in_flight(collator, formatter, branch_documents):
    seen = {}

    async def loader():
        seen["loading"] = view.loading
        seen["render"] = view.render()
        return await _loader_for(branch_documents)()

    view = ViewState(collator=collator, formatter=formatter, loader=loader)
    asyncio.run(view.load())

    assert seen["loading"] is True
    assert seen["render"].loading is True
    assert seen["render"].rows == []
    assert view.loading is False


def test_ready_renders_sorted_rows_and_total(ready_view):
    table = ready_view.render()
    assert ready_view.status == READY
    assert [(r.name, r.formatted_revenue) for r in table.rows] == [
        ("apple", "2,000.00"),
        ("Éclair", "7.00"),
        ("Gadget", "10.00"),
        ("Widget", "40.00"),
    ]
    assert table.total == "2,057.00"
    assert table.error is None
    assert table.empty is False


def test_query_change_rederives_rows_and_total(ready_view):
    ready_view.set_query("WID")
    table = ready_view.render()
    assert [r.name for r in table.rows] == ["Widget"]
    assert table.total == "40.00"

    ready_view.set_query("")
    assert len(ready_view.render().rows) == 4


def test_no_match_is_empty_with_zero_total(ready_view):
    ready_view.set_query("sprocket")
    table = ready_view.render()
    assert table.rows == []
    assert table.empty is True
    assert table.total == "0.00"


def test_failure_sets_error_without_raising(collator, formatter):
    view = ViewState(collator=collator, formatter=formatter, loader=_failing_loader)
    asyncio.run(view.load())

    assert view.status == FAILED
    assert view.loading is False
    assert view.error == "Unexpected token < in JSON"

    table = view.render()
    assert table.error == "Unexpected token < in JSON"
    assert table.rows == []
    assert table.total is None


def test_one_failing_source_renders_no_rows(branch_files, tmp_path, collator, formatter):
    branch_files[2]["location"] = str(tmp_path / "missing.json")

    async def loader():
        return await load_branches(branch_files)

    view = ViewState(collator=collator, formatter=formatter, loader=loader)
    asyncio.run(view.load())

    view.set_query("")
    table = view.render()
    assert view.status == FAILED
    assert table.rows == []
    assert "missing.json" in table.error


def test_load_runs_only_once(ready_view):
    with pytest.raises(RuntimeError):
        asyncio.run(ready_view.load())
