from santa_draw.services.constraints import (
    Participant,
    exclusions_for,
    is_permitted,
    permission_graph,
    permitted_receivers,
)


def test_blacklist_defaults_to_empty():
    participant = Participant(id="a", name="Ana")
    assert exclusions_for(participant) == frozenset()


def test_cannot_give_to_self():
    participant = Participant(id="a", name="Ana")
    assert not is_permitted(participant, participant)


def test_blacklisted_receiver_is_not_permitted():
    ana = Participant(id="a", name="Ana", blacklist=frozenset({"b"}))
    bruno = Participant(id="b", name="Bruno")
    assert not is_permitted(ana, bruno)
    assert is_permitted(bruno, ana)


def test_permitted_receivers_and_graph():
    ana = Participant(id="a", name="Ana", blacklist=frozenset({"b"}))
    bruno = Participant(id="b", name="Bruno")
    carla = Participant(id="c", name="Carla")
    group = [ana, bruno, carla]

    assert permitted_receivers(ana, group) == [carla]
    assert permission_graph(group) == {"a": {"c"}, "b": {"a", "c"}, "c": {"a", "b"}}


def test_with_blacklist_keeps_identity():
    ana = Participant(id="a", name="Ana", phone="123")
    updated = ana.with_blacklist(["b", "c"])
    assert updated.id == "a"
    assert updated.phone == "123"
    assert updated.blacklist == frozenset({"b", "c"})


def test_list_blacklist_is_treated_as_a_set():
    ana = Participant(id="a", name="Ana", blacklist=["b", "b"])
    bruno = Participant(id="b", name="Bruno")
    assert exclusions_for(ana) == frozenset({"b"})
    assert not is_permitted(ana, bruno)
