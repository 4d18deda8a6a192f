import base64

import pytest

from santa_draw.services import group_flow
from santa_draw.services.reveal import (
    RevealLinkError,
    build_reveal_link,
    decode_name,
    encode_name,
    parse_reveal_link,
    reveal_links,
    reveal_message,
    whatsapp_link,
)


def test_encode_name_matches_browser_encoding():
    assert encode_name("José Silva") == base64.b64encode(b"Jos%C3%A9%20Silva").decode()
    assert encode_name("O'Brien (Jr)") == base64.b64encode(b"O'Brien%20(Jr)").decode()


def test_decode_name_reverses_encoding():
    assert decode_name(encode_name("Zoë & Ana")) == "Zoë & Ana"


def test_decode_name_rejects_garbage():
    with pytest.raises(RevealLinkError):
        decode_name("not base64!")


def test_build_and_parse_reveal_link():
    link = build_reveal_link("https://santa.example/", "Ana", "Bruno Costa")
    assert link.startswith("https://santa.example/result?u=")
    assert parse_reveal_link(link) == ("Ana", "Bruno Costa")


def test_parse_reveal_link_requires_both_params():
    with pytest.raises(RevealLinkError):
        parse_reveal_link("https://santa.example/result?u=QW5h")


def test_reveal_links_for_drawn_group():
    group = group_flow.create_group()
    for name in ["Ana", "Bruno", "Carla"]:
        group_flow.add_participant(group, name)
    group_flow.run_draw(group, seed=6)

    links = reveal_links(group, "https://santa.example")

    assert set(links) == {p.id for p in group.participants}
    for participant in group.participants:
        giver, receiver = parse_reveal_link(links[participant.id])
        assert giver == participant.name
        assert receiver == group_flow.receiver_of(group, participant.id).name


def test_reveal_links_empty_before_draw():
    group = group_flow.create_group()
    group_flow.add_participant(group, "Ana")
    assert reveal_links(group, "https://santa.example") == {}


def test_whatsapp_link_keeps_only_digits():
    link = whatsapp_link("+55 (11) 99999-0000", "hi there")
    assert link == "https://wa.me/5511999990000?text=hi%20there"


def test_whatsapp_link_requires_phone():
    with pytest.raises(RevealLinkError):
        whatsapp_link("", "hi")


def test_reveal_message_mentions_name_and_link():
    message = reveal_message("Ana", "https://santa.example/result?u=x&f=y")
    assert "Ana" in message
    assert "https://santa.example/result?u=x&f=y" in message


def test_decode_name_rejects_broken_percent_escape():
    token = base64.b64encode(b"Ana%FF").decode()
    with pytest.raises(RevealLinkError):
        decode_name(token)
