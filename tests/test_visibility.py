import pytest

from warroom.state.models import Mission, Task
from warroom.state.visibility import VisibilityMode, filter_for_visibility, group_tasks


def build():
    open_mission = Mission(id="m-open", title="Open")
    done_mission = Mission(id="m-done", title="Done", is_manually_completed=True)
    tasks = [
        Task(id="t1", title="open in open", mission_id="m-open"),
        Task(id="t2", title="done in open", is_done=True, mission_id="m-open"),
        Task(id="t3", title="done in done", is_done=True, mission_id="m-done"),
        Task(id="t4", title="open in done", mission_id="m-done"),
        Task(id="t5", title="standalone open"),
        Task(id="t6", title="standalone done", is_done=True),
        Task(id="t7", title="dangling", mission_id="m-gone"),
    ]
    return [open_mission, done_mission], tasks


def ids(tasks):
    return [task.id for task in tasks]


def test_overview_shows_everything() -> None:
    missions, tasks = build()

    groups = filter_for_visibility(VisibilityMode.OVERVIEW, missions, tasks)

    assert [g.mission.id for g in groups.missions] == ["m-open", "m-done"]
    assert ids(groups.missions[0].tasks) == ["t1", "t2"]
    assert ids(groups.missions[1].tasks) == ["t3", "t4"]
    assert ids(groups.standalone) == ["t5", "t6", "t7"]


def test_focus_hides_completed_missions_and_done_standalone() -> None:
    missions, tasks = build()

    groups = filter_for_visibility(VisibilityMode.FOCUS, missions, tasks)

    assert [g.mission.id for g in groups.missions] == ["m-open"]
    assert ids(groups.missions[0].tasks) == ["t1", "t2"]
    assert ids(groups.standalone) == ["t5", "t7"]


def test_accomplishment_shows_only_completed_work() -> None:
    missions, tasks = build()

    groups = filter_for_visibility(VisibilityMode.ACCOMPLISHMENT, missions, tasks)

    assert [g.mission.id for g in groups.missions] == ["m-done"]
    assert ids(groups.missions[0].tasks) == ["t3"]
    assert ids(groups.standalone) == ["t6"]


def test_filter_does_not_mutate_inputs() -> None:
    missions, tasks = build()
    before = [t.to_dict() for t in tasks], [m.to_dict() for m in missions]

    for mode in VisibilityMode:
        filter_for_visibility(mode, missions, tasks)

    assert ([t.to_dict() for t in tasks], [m.to_dict() for m in missions]) == before


def test_eligibility_reported_per_group() -> None:
    missions = [Mission(id="a", title="A"), Mission(id="b", title="B"), Mission(id="c", title="C")]
    tasks = [
        Task(id="1", title="1", is_done=True, mission_id="a"),
        Task(id="2", title="2", is_done=False, mission_id="b"),
    ]

    groups = filter_for_visibility(VisibilityMode.OVERVIEW, missions, tasks)

    assert [g.eligible for g in groups.missions] == [True, False, False]


def test_dangling_reference_counts_as_standalone() -> None:
    owned, standalone = group_tasks([Mission(id="m", title="M")], [Task(id="t", title="T", mission_id="x")])

    assert owned == {"m": []}
    assert ids(standalone) == ["t"]


def test_invalid_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        VisibilityMode("everything")
    with pytest.raises(ValueError):
        filter_for_visibility("overview", [], [])


def test_mode_cycles() -> None:
    assert VisibilityMode.OVERVIEW.next() is VisibilityMode.FOCUS
    assert VisibilityMode.FOCUS.next() is VisibilityMode.ACCOMPLISHMENT
    assert VisibilityMode.ACCOMPLISHMENT.next() is VisibilityMode.OVERVIEW
