from santa_draw.services.cycles import extract_cycles, is_single_cycle

TWO_TRIANGLES = {"a": "b", "b": "c", "c": "a", "d": "e", "e": "f", "f": "d"}


def test_two_disjoint_triangles():
    cycles = extract_cycles(TWO_TRIANGLES, ["a", "b", "c", "d", "e", "f"])
    assert cycles == [["a", "b", "c"], ["d", "e", "f"]]


def test_extraction_start_does_not_change_membership():
    for order in (["e", "a", "f", "c", "b", "d"], ["f", "e", "d", "c", "b", "a"], ["c", "d", "a", "b", "e", "f"]):
        cycles = extract_cycles(TWO_TRIANGLES, order)
        assert len(cycles) == 2
        assert all(len(cycle) == 3 for cycle in cycles)
        assert sorted(sorted(cycle) for cycle in cycles) == [["a", "b", "c"], ["d", "e", "f"]]


def test_cycle_keeps_traversal_order():
    cycles = extract_cycles(TWO_TRIANGLES, ["e", "a", "b", "c", "d", "f"])
    assert cycles[0] == ["e", "f", "d"]
    assert cycles[1] == ["a", "b", "c"]


def test_ids_without_receiver_are_left_out():
    mapping = {"a": "b", "b": "c"}
    assert extract_cycles(mapping, ["a", "b", "c"]) == [["a", "b"]]


def test_empty_mapping():
    assert extract_cycles({}, ["a", "b"]) == []


def test_is_single_cycle():
    assert is_single_cycle({"a": "b", "b": "c", "c": "a"}, ["a", "b", "c"])
    assert not is_single_cycle(TWO_TRIANGLES, ["a", "b", "c", "d", "e", "f"])
