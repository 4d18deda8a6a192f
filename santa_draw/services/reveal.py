from __future__ import annotations

import base64
import binascii
import re
from typing import Dict, Tuple
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

from santa_draw.services.group_flow import Group, participant_by_id


# Left unescaped by JavaScript's encodeURIComponent.
URI_COMPONENT_SAFE = "!~*'()"


class RevealLinkError(ValueError):
    pass


def encode_name(name: str) -> str:
    return base64.b64encode(quote(name, safe=URI_COMPONENT_SAFE).encode("ascii")).decode("ascii")


def decode_name(token: str) -> str:
    try:
        quoted = base64.b64decode(token.encode("ascii"), validate=True).decode("ascii")
        return unquote(quoted, errors="strict")
    except (binascii.Error, UnicodeError) as exc:
        raise RevealLinkError("The reveal link is malformed.") from exc


def build_reveal_link(base_url: str, giver_name: str, receiver_name: str) -> str:
    query = urlencode({"u": encode_name(giver_name), "f": encode_name(receiver_name)})
    return f"{base_url.rstrip('/')}/result?{query}"


def parse_reveal_link(url: str) -> Tuple[str, str]:
    params = parse_qs(urlsplit(url).query)
    if "u" not in params or "f" not in params:
        raise RevealLinkError("The reveal link is missing its parameters.")
    return decode_name(params["u"][0]), decode_name(params["f"][0])


def reveal_links(group: Group, base_url: str) -> Dict[str, str]:
    links: Dict[str, str] = {}
    for giver in group.participants:
        receiver = participant_by_id(group, group.draw_results.get(giver.id, ""))
        if receiver is None:
            continue
        links[giver.id] = build_reveal_link(base_url, giver.name, receiver.name)
    return links


def reveal_message(name: str, link: str) -> str:
    return (
        "*Secret Santa*\n\n"
        f"Hi, *{name}*.\n"
        "The Secret Santa draw is done.\n"
        "Open the link below to find out who you are giving a gift to:\n\n"
        f"{link}\n\n"
        "*Important:* this link is personal, do not share it!"
    )


def whatsapp_link(phone: str, message: str) -> str:
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        raise RevealLinkError("A phone number is required to send a WhatsApp message.")
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"
