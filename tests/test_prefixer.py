import io

import pytest

from sake.prefixer import Prefixer


def test_read_prefixes_every_line():
    p = Prefixer(io.BytesIO(b"a\nb\n"), "> ")
    assert p.read() == b"> a\n> b\n"


def test_last_line_without_newline_is_prefixed():
    out = Prefixer(io.BytesIO(b"one\ntwo"), "host | ").read()
    assert out.endswith(b"host | two")
    assert out.count(b"host | ") == 2


def test_empty_input_gives_empty_output():
    p = Prefixer(io.BytesIO(b""), "x ")
    assert p.read() == b""
    assert p.read(10) == b""


@pytest.mark.parametrize("size", [1, 2, 3, 7, 100])
def test_chunked_reads_equal_full_read(size):
    data = b"first line\nsecond\n\nlast"
    full = Prefixer(io.BytesIO(data), "srv | ").read()
    p = Prefixer(io.BytesIO(data), "srv | ")
    chunks = []
    while True:
        chunk = p.read(size)
        if not chunk:
            break
        assert len(chunk) <= size
        chunks.append(chunk)
    assert b"".join(chunks) == full


def test_removing_prefix_restores_input():
    data = b"alpha\nbeta\ngamma\n"
    prefix = b"p: "
    out = Prefixer(io.BytesIO(data), prefix).read()
    lines = out.splitlines(keepends=True)
    assert all(line.startswith(prefix) for line in lines)
    assert b"".join(line[len(prefix):] for line in lines) == data


def test_write_to_copies_everything_and_counts_bytes():
    data = b"x\ny\nz\n"
    sink = io.BytesIO()
    written = Prefixer(io.BytesIO(data), "h | ").write_to(sink)
    expected = Prefixer(io.BytesIO(data), "h | ").read()
    assert sink.getvalue() == expected
    assert written == len(expected)


def test_text_reader_and_bytes_prefix():
    out = Prefixer(io.StringIO("a\nb\n"), b"> ").read()
    assert out == Prefixer(io.BytesIO(b"a\nb\n"), "> ").read()


def test_empty_prefix_is_identity():
    data = b"keep\nas is\n"
    assert Prefixer(io.BytesIO(data), "").read() == data