import pytest

from smarthouse.protocol import ChannelKind, Frame, NACK, encode_frame, parse_frame


def test_encode_wire_bytes():
    assert encode_frame("house", ChannelKind.DIGITAL_OUT, 3, "1") == b"house:0:3:1;\r"


def test_encode_accepts_string_kind():
    assert encode_frame("house", "3", "switch_0", "lamp") == encode_frame(
        "house", ChannelKind.SET_CHANNEL_NAME, "switch_0", "lamp"
    )


@pytest.mark.parametrize(
    "name,kind,channel,value",
    [
        ("house", ChannelKind.DIGITAL_OUT, 5, "200"),
        ("house", ChannelKind.DIGITAL_IN, 0, "door"),
        ("kitchen", ChannelKind.ANALOG, 7, "temp"),
    ],
)
def test_round_trip(name, kind, channel, value):
    frame = parse_frame(encode_frame(name, kind, channel, value))
    assert frame == Frame(name, str(int(kind)), str(channel), value)
    assert frame.kind_code == kind
    assert frame.channel_index == channel


def test_parse_ignores_trailing_text():
    assert parse_frame("a:1:2:x;\rjunk") == Frame("a", "1", "2", "x")


def test_parse_pads_missing_fields():
    assert parse_frame("a:1;") == Frame("a", "1", "", "")


def test_parse_requires_terminator():
    with pytest.raises(ValueError):
        parse_frame("a:1:2:3")


def test_parse_rejects_extra_fields():
    with pytest.raises(ValueError):
        parse_frame("a:1:2:3:4;")


def test_kind_code_requires_digit():
    with pytest.raises(ValueError):
        Frame("a", "", "0", "").kind_code


def test_channel_index_requires_digit():
    with pytest.raises(ValueError):
        Frame("a", "0", "x", "").channel_index


@pytest.mark.parametrize(
    "kind,wire",
    [
        (ChannelKind.DIGITAL_OUT, b"h:0:1:v;\r"),
        (ChannelKind.DIGITAL_IN, b"h:1:1:v;\r"),
        (ChannelKind.ANALOG, b"h:2:1:v;\r"),
        (ChannelKind.SET_CHANNEL_NAME, b"h:3:1:v;\r"),
    ],
)
def test_channel_kind_values(kind, wire):
    assert encode_frame("h", kind, 1, "v") == wire
    assert parse_frame(wire).kind_code == kind


def test_nack_is_not_a_frame():
    assert NACK == "nack"
    with pytest.raises(ValueError):
        parse_frame(NACK)