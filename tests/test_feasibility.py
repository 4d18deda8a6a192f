import pytest

from helpers import make_participants

from santa_draw.services.constraints import Participant, permission_graph
from santa_draw.services.draw import perform_circular_draw
from santa_draw.services.feasibility import Infeasibility, reachability_clusters, validate


@pytest.mark.parametrize("names", [[], ["A"], ["A", "B"]])
def test_too_few_participants(names):
    result = validate(make_participants(names, {"A": ["B"]}), seed=1)
    assert not result.is_valid
    assert result.kind == Infeasibility.TOO_FEW
    assert "3" in result.reason
    assert not result.can_relax


def test_five_without_exclusions_is_valid():
    result = validate(make_participants(["A", "B", "C", "D", "E"]), seed=1)
    assert result.is_valid
    assert result.reason is None
    assert result.kind is None


def test_participant_excluding_everyone_cannot_give():
    result = validate(make_participants(["Ana", "Bruno", "Carla"], {"Bruno": ["Ana", "Carla"]}), seed=1)
    assert result.kind == Infeasibility.CANNOT_GIVE
    assert "Bruno" in result.reason
    assert not result.can_relax


def test_participant_excluded_by_everyone_cannot_receive():
    participants = make_participants(["Ana", "Bruno", "Carla", "Davi"], {
        "Ana": ["Carla"],
        "Bruno": ["Carla"],
        "Davi": ["Carla"],
    })
    result = validate(participants, seed=1)
    assert result.kind == Infeasibility.CANNOT_RECEIVE
    assert "Carla" in result.reason
    assert not result.can_relax


def test_mutual_only_option_deadlock():
    participants = make_participants(["A", "B", "C", "D"], {"A": ["C", "D"], "B": ["C", "D"]})
    result = validate(participants, seed=1)
    assert not result.is_valid
    assert result.kind == Infeasibility.MUTUAL_DEADLOCK
    assert "A and B" in result.reason
    assert result.can_relax


def test_three_way_exclusion_ring_is_valid():
    participants = make_participants(["A", "B", "C"], {"A": ["B"], "B": ["C"], "C": ["A"]})
    result = validate(participants, seed=7)
    assert result.is_valid
    assert perform_circular_draw(participants, seed=7) == {"A": "C", "B": "A", "C": "B"}


def test_isolated_clusters_are_named():
    names = ["A", "B", "C", "D", "E", "F"]
    left, right = names[:3], names[3:]
    blacklists = {name: right for name in left}
    blacklists.update({name: left for name in right})
    result = validate(make_participants(names, blacklists), seed=1)
    assert result.kind == Infeasibility.ISOLATED_CLUSTERS
    assert "[A, B, C]" in result.reason
    assert "[D, E, F]" in result.reason
    assert result.can_relax


def test_connected_group_without_circle_reports_generic_failure():
    # A <-> B <-> C <-> D is a chain: everyone reaches everyone, no single circle exists.
    participants = make_participants(["A", "B", "C", "D"], {
        "A": ["C", "D"],
        "B": ["D"],
        "C": ["A"],
        "D": ["A", "B"],
    })
    result = validate(participants, seed=1)
    assert result.kind == Infeasibility.NO_CIRCLE
    assert result.can_relax
    assert result.reason


def test_list_blacklists_are_accepted():
    participants = [
        Participant(id="A", name="A", blacklist=["B"]),
        Participant(id="B", name="B", blacklist=["C"]),
        Participant(id="C", name="C", blacklist=["A"]),
    ]
    result = validate(participants, seed=1)
    assert result.is_valid
    assert perform_circular_draw(participants, seed=1) == {"A": "C", "B": "A", "C": "B"}

    participants[1] = Participant(id="B", name="B", blacklist=["A", "C"])
    result = validate(participants, seed=1)
    assert result.kind == Infeasibility.CANNOT_GIVE


def test_reachability_clusters_for_one_way_split():
    names = ["A", "B", "C", "D"]
    participants = make_participants(names, {"A": ["C", "D"], "B": ["C", "D"]})
    clusters = reachability_clusters(participants, permission_graph(participants))
    assert clusters == [["A", "B"]]


def test_validator_agrees_with_solver():
    names = [f"P{index}" for index in range(20)]
    blacklists = {name: [names[(index + 3) % 20], names[(index + 7) % 20]] for index, name in enumerate(names)}
    participants = make_participants(names, blacklists)
    result = validate(participants, seed=5)
    assert result.is_valid
    for seed in range(5):
        assert perform_circular_draw(participants, seed=seed) is not None
