from __future__ import annotations

import json

import pytest

from prompt_stream.streaming.decoder import DeltaHandler, StreamDecoder


class CollectingHandler:
    def __init__(self) -> None:
        self.deltas: list[str] = []

    def on_delta(self, text: str) -> None:
        self.deltas.append(text)


def chunk_line(*contents: str | None, chunk_id: str = 'c') -> bytes:
    choices = [{'index': i, 'delta': {} if c is None else {'content': c}} for i, c in enumerate(contents)]
    payload = {'id': chunk_id, 'object': 'chat.completion.chunk', 'created': 1, 'model': 'm', 'choices': choices}
    return f'data: {json.dumps(payload, ensure_ascii=False)}\n'.encode()


def test_handler_protocol() -> None:
    assert isinstance(CollectingHandler(), DeltaHandler)


def test_ignores_malformed_and_comment_lines() -> None:
    handler = CollectingHandler()
    decoder = StreamDecoder(handler)

    stream = b': keep-alive\n' + b'data: {not json\n' + chunk_line('Hi') + b'\n' + b'data: [DONE]\n'
    chunks = decoder.feed_all([stream])

    assert len(chunks) == 1
    assert chunks[0].choices[0].delta.content == 'Hi'
    assert handler.deltas == ['Hi']
    assert decoder.skipped == 2  # noqa: PLR2004


@pytest.mark.parametrize('split_at', [1, 6, 20, -3, -1])
def test_event_split_across_segments(split_at: int) -> None:
    line = chunk_line('Hello')
    decoder = StreamDecoder()

    assert decoder.feed(line[:split_at]) == []
    completed = decoder.feed(line[split_at:])
    decoder.close()

    assert len(completed) == 1
    assert len(decoder.chunks) == 1


def test_event_split_across_three_segments() -> None:
    line = chunk_line('abc')
    decoder = StreamDecoder()
    chunks = decoder.feed_all([line[:5], line[5:30], line[30:]])
    assert [c.choices[0].delta.content for c in chunks] == ['abc']


def test_multibyte_character_split_between_segments() -> None:
    line = chunk_line('héllo ✓')
    cut = line.index('✓'.encode()) + 1
    handler = CollectingHandler()

    StreamDecoder(handler).feed_all([line[:cut], line[cut:]])

    assert handler.deltas == ['héllo ✓']


def test_crlf_and_unterminated_final_line() -> None:
    decoder = StreamDecoder()
    first = chunk_line('a').replace(b'\n', b'\r\n')
    last = chunk_line('b').rstrip(b'\n')

    chunks = decoder.feed_all([first + last])

    assert [c.choices[0].delta.content for c in chunks] == ['a', 'b']


def test_callback_gets_all_choices_concatenated_in_order() -> None:
    handler = CollectingHandler()
    decoder = StreamDecoder(handler)

    decoder.feed_all([chunk_line('A', 'B'), chunk_line(None, None), chunk_line('C')])

    assert handler.deltas == ['AB', '', 'C']


def test_feed_after_close_fails() -> None:
    decoder = StreamDecoder()
    decoder.close()
    with pytest.raises(RuntimeError):
        decoder.feed(b'data: {}\n')
