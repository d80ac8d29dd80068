"""Tests for splitting compressed chunks into delimited messages."""

import gzip

import pytest

from client.errors import DecodeError, FrameOverflowError
from client.framing import FrameDecoder
from client.protocol import encode_frame


def _chunks(text: str, *cuts: int) -> list:
    bounds = [0, *cuts, len(text)]
    return [
        gzip.compress(text[start:end].encode("utf-8")) for start, end in zip(bounds, bounds[1:])
    ]


def _decode_all(decoder: FrameDecoder, chunks: list) -> list:
    messages = []
    for chunk in chunks:
        messages.extend(decoder.feed(chunk))
    return messages


STREAM = 'ID:7\nMSG:welcome to Town\nDATA:{"Town": {}}\nMSG:héllo wörld\n'


def test_single_frame_with_several_messages() -> None:
    decoder = FrameDecoder()

    messages = list(decoder.feed(encode_frame("ID:7", "MSG:hi", "DATA:{}")))

    assert messages == ["ID:7", "MSG:hi", "DATA:{}"]
    assert decoder.pending == ""


@pytest.mark.parametrize(
    "cuts",
    [
        (),
        (1,),
        (4, 5),
        (10, 30, 31, 45),
        tuple(range(1, len(STREAM))),
    ],
)
def test_chunking_does_not_change_messages(cuts: tuple) -> None:
    expected = _decode_all(FrameDecoder(), _chunks(STREAM))

    assert _decode_all(FrameDecoder(), _chunks(STREAM, *cuts)) == expected
    assert expected == ["ID:7", "MSG:welcome to Town", 'DATA:{"Town": {}}', "MSG:héllo wörld"]


def test_multibyte_character_split_across_chunks() -> None:
    raw = "MSG:é\n".encode("utf-8")
    split = raw.index(b"\xa9")
    decoder = FrameDecoder()

    first = list(decoder.feed(gzip.compress(raw[:split])))
    second = list(decoder.feed(gzip.compress(raw[split:])))

    assert first == []
    assert second == ["MSG:é"]


def test_unterminated_message_waits_for_delimiter() -> None:
    decoder = FrameDecoder()

    assert list(decoder.feed(gzip.compress(b"DATA:{\"Town\""))) == []
    assert decoder.pending == 'DATA:{"Town"'
    assert list(decoder.feed(gzip.compress(b": {}}\nID:"))) == ['DATA:{"Town": {}}']
    assert decoder.pending == "ID:"


def test_messages_are_stripped() -> None:
    decoder = FrameDecoder()

    assert list(decoder.feed(gzip.compress(b"  MSG:padded \r\n\n"))) == ["MSG:padded", ""]


def test_corrupt_chunk_is_dropped_and_stream_continues() -> None:
    decoder = FrameDecoder()
    list(decoder.feed(gzip.compress(b"MSG:par")))

    with pytest.raises(DecodeError):
        list(decoder.feed(b"definitely not gzip"))

    assert decoder.pending == "MSG:par"
    assert list(decoder.feed(gzip.compress(b"tial\n"))) == ["MSG:partial"]


def test_truncated_chunk_raises_decode_error() -> None:
    frame = encode_frame("MSG:cut short")

    with pytest.raises(DecodeError):
        list(FrameDecoder().feed(frame[: len(frame) // 2]))


def test_empty_chunk_yields_nothing() -> None:
    assert list(FrameDecoder().feed(b"")) == []


def test_concatenated_frames_in_one_read() -> None:
    decoder = FrameDecoder()

    messages = list(decoder.feed(encode_frame("MSG:a") + encode_frame("MSG:b")))

    assert messages == ["MSG:a", "MSG:b"]


def test_overflow_discards_pending_after_yielding_complete_messages() -> None:
    decoder = FrameDecoder(max_pending=8)
    received = []

    with pytest.raises(FrameOverflowError):
        for message in decoder.feed(gzip.compress(b"MSG:ok\n" + b"x" * 20)):
            received.append(message)

    assert received == ["MSG:ok"]
    assert decoder.pending == ""
    assert list(decoder.feed(encode_frame("MSG:after"))) == ["MSG:after"]
