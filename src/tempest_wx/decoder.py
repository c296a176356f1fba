"""
Envelope classifier: text in, typed record (or decode failure) out.
"""

import json
from typing import Any, Union

from tempest_wx.errors import DecodeError, Malformed, MissingDiscriminator, TypeMismatch
from tempest_wx.models.envelope import Envelope
from tempest_wx.models.record import Record
from tempest_wx.positional import json_type
from tempest_wx.variants import DECODERS, decode_unknown

DISCRIMINATOR = "type"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_envelope(raw: Union[str, bytes]) -> Envelope:
    """Parse raw JSON text into an Envelope and read its discriminator."""
    try:
        tree = json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError, RecursionError) as e:
        raise Malformed(str(e)) from e
    if not isinstance(tree, dict):
        raise Malformed(f"expected a JSON object, got {json_type(tree)}")

    discriminator = tree.get(DISCRIMINATOR)
    if discriminator is None or discriminator == "":
        raise MissingDiscriminator()
    if not isinstance(discriminator, str):
        raise TypeMismatch(DISCRIMINATOR, "string", json_type(discriminator))
    return Envelope(discriminator=discriminator, body=tree)


def decode_envelope(envelope: Envelope) -> Record:
    decoder = DECODERS.get(envelope.discriminator, decode_unknown)
    try:
        return decoder(envelope)
    except RecursionError as e:
        raise Malformed("object nested too deeply") from e


def decode(raw: Union[str, bytes]) -> Record:
    """Decode one envelope, raising a DecodeError subclass on failure."""
    return decode_envelope(parse_envelope(raw))


def classify_and_decode(raw: Union[str, bytes]) -> Union[Record, DecodeError]:
    """Decode one envelope; failures are returned, not raised.

    Unrecognised discriminators decode to ``Unknown`` rather than failing.
    """
    try:
        return decode(raw)
    except DecodeError as e:
        # returned errors hold no frames or chained exceptions referencing the input
        e.__cause__ = e.__context__ = None
        return e.with_traceback(None)


def is_known(discriminator: str) -> bool:
    return discriminator in DECODERS
