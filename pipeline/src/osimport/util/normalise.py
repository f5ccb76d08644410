"""Postcode canonicalisation helpers."""

from __future__ import annotations

INWARD_CODE_LENGTH = 3


def strip_quotes(value: str) -> str:
    return value.replace('"', "").strip()


def split_postcode(value: str) -> tuple[str, str]:
    """Split a postcode into its outward and inward codes.

    With a space: outward is the text before the first space and inward the
    text after the last space. Without one the postcode is treated as fixed
    width, outward being the first 4 characters and inward the next 3.

    A short inward code is rejected: it would share a key with the derived
    district or sector rows.
    """

    postcode = strip_quotes(value)
    if not postcode:
        raise ValueError("postcode is empty")
    if " " in postcode:
        outward, inward = postcode[: postcode.index(" ")], postcode[postcode.rindex(" ") + 1 :]
    else:
        outward, inward = postcode[:4], postcode[4:7]
    if len(inward) < INWARD_CODE_LENGTH:
        raise ValueError(f"postcode {postcode!r} has no complete inward code")
    return outward, inward


def join_postcode(outward: str, inward: str) -> str:
    if not inward:
        return outward
    return f"{outward} {inward}"
