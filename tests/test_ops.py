from __future__ import annotations

import pytest

from quillsmith.core.exceptions import DecodeError, MalformedOpError
from quillsmith.core.ops import (
    TRUE_MARKER,
    Op,
    RawOp,
    closing_op,
    coerce_scalar,
    decode_delta,
    populate_op,
)


def test_populate_text_op_normalises_attributes() -> None:
    raw = RawOp(
        insert="stuff to insert.\n",
        attributes={
            "bold": True,
            "link": "https://widerwebs.com",
            "italic": False,
            "underline": None,
        },
    )

    op = populate_op(raw, Op())

    assert op.type == "text"
    assert op.data == "stuff to insert.\n"
    assert op.attrs == {
        "bold": TRUE_MARKER,
        "italic": "",
        "link": "https://widerwebs.com",
        "underline": "",
    }
    assert op.has_attr("bold")
    assert not op.has_attr("italic")
    assert not op.has_attr("missing")


def test_populate_escapes_text_payload() -> None:
    op = populate_op(RawOp(insert="<b>Tom & \"Jerry's\"</b>"), Op())
    assert op.data == "&lt;b&gt;Tom &amp; &quot;Jerry&#x27;s&quot;&lt;/b&gt;"


def test_populate_embed_uses_key_as_type() -> None:
    op = populate_op(RawOp(insert={"image": "url-or-base64"}), Op())

    assert op.type == "image"
    assert op.data == "url-or-base64"
    assert op.attrs == {}


def test_populate_reuses_op_without_leaking_attributes() -> None:
    op = Op()
    populate_op(RawOp(insert="\n", attributes={"align": "center", "blockquote": True}), op)
    populate_op(RawOp(insert={"image": "picture.png"}), op)

    assert op == Op(data="picture.png", type="image", attrs={})


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("random string", "random string"),
        (True, "y"),
        (False, ""),
        (None, ""),
        (3, "3"),
        (3.0, "3"),
        (2.5, "2.5"),
        ([1, 2], ""),
    ],
)
def test_coerce_scalar(value: object, expected: str) -> None:
    assert coerce_scalar(value) == expected


@pytest.mark.parametrize(
    "insert",
    [None, {}, {"image": "a", "video": "b"}, 42, ["text"]],
)
def test_populate_rejects_unusable_inserts(insert: object) -> None:
    with pytest.raises(MalformedOpError) as excinfo:
        populate_op(RawOp(insert=insert), Op(), index=3)

    assert excinfo.value.index == 3
    assert "#3" in str(excinfo.value)


def test_decode_delta_accepts_json_and_python_sequences() -> None:
    from_json = decode_delta(b'[{"insert": "a", "attributes": {"bold": true}, "retain": 4}]')
    from_python = decode_delta([{"insert": "a", "attributes": {"bold": True}}])

    assert from_json == from_python
    assert from_json[0].attributes == {"bold": True}


def test_decode_delta_keeps_missing_insert_for_later() -> None:
    (raw,) = decode_delta('[{"attributes": null}]')
    assert raw.insert is None
    assert raw.attributes is None


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b'{"insert": "x"}',
        b"[1]",
        b'[{"insert": "x", "attributes": [1]}]',
    ],
)
def test_decode_delta_rejects_bad_shapes(payload: bytes) -> None:
    with pytest.raises(DecodeError, match="Invalid delta"):
        decode_delta(payload)


def test_closing_op_is_blank_text() -> None:
    op = closing_op()
    assert op.type == "text"
    assert op.data == ""
    assert op.attrs == {}
