# 2023 - LambdaConcept - po@lambdaconcept.com

import io
import time

import pytest

from ..errors import *
from ..transfer import *
from ..i2c.tools import I2CTools
from .stubs import *


class Pipe_Stub(io.RawIOBase):
    """Non seekable stream returning small chunks, like a pipe."""
    def __init__(self, data, chunk=3):
        self.data = bytearray(data)
        self.chunk = chunk
        self.written = bytearray()

    def readable(self):
        return True

    def writable(self):
        return True

    def read(self, size=-1):
        n = min(size, self.chunk)
        out, self.data = bytes(self.data[:n]), self.data[n:]
        return out

    def write(self, b):
        self.written += b
        return len(b)


def test_read_input_seekable():
    stream = io.BytesIO(bytes(range(32)))
    assert(read_input(stream, 4, 8) == bytes(range(4, 12)))


def test_read_input_pipe():
    stream = Pipe_Stub(bytes(range(32)))
    assert(read_input(stream, 10, 7) == bytes(range(10, 17)))


def test_read_input_short():
    assert(read_input(io.BytesIO(b"abc"), 1, 128) == b"bc")
    assert(read_input(io.BytesIO(b"abc"), 10, 128) == b"")
    assert(read_input(Pipe_Stub(b"abc"), 10, 128) == b"")


def test_write_output_seekable():
    stream = io.BytesIO()
    write_output(stream, b"\x01\x02", 3)
    assert(stream.getvalue() == b"\x00\x00\x00\x01\x02")


def test_write_output_pipe():
    stream = Pipe_Stub(b"")
    write_output(stream, b"\x01\x02", 2)
    assert(stream.written == b"\x00\x00\x01\x02")


def test_write_chip(monkeypatch, caplog):
    sleeps = []
    monkeypatch.setattr(time, "sleep", sleeps.append)
    chip = Chip_Stub()
    bus = I2CTools("1")
    monkeypatch.setattr("subprocess.run", I2CTools_Stub(chip))

    caplog.set_level("INFO")
    assert(write_chip(bus, 0x50, b"\x10\x20\x30", start=0x7e, delay=0.25) == 3)

    assert(chip.writes == [(0x7e, 0x10), (0x7f, 0x20), (0x80, 0x30)])
    assert(sleeps == [0.25, 0.25])
    assert("Writing byte '0x30' to bus 1, chip-address '0x50', "
           "data-address '0x80'" in caplog.text)


def test_write_chip_overflow(monkeypatch):
    chip = Chip_Stub()
    monkeypatch.setattr("subprocess.run", I2CTools_Stub(chip))

    with pytest.raises(TransferError):
        write_chip(I2CTools("1"), 0x50, bytes(17), start=0xf0, delay=0)
    assert(chip.writes == [])


def test_read_chip(monkeypatch):
    chip = Chip_Stub()
    chip.mem[:4] = b"\x00\xff\xff\xff"
    monkeypatch.setattr("subprocess.run", I2CTools_Stub(chip))

    text, data = read_chip(I2CTools("1"), 0x50)
    assert(text.startswith("     0  1"))
    assert(data == bytes(chip.mem))


def test_read_chip_garbage():
    class Garbage_Stub:
        name = "stub"
        def dump(self, addr):
            return "Error: Read failed\n"

    with pytest.raises(TransferError):
        read_chip(Garbage_Stub(), 0x50)


def test_write_output_gap_only():
    stream = io.BytesIO()
    write_output(stream, b"", 5)
    assert(stream.getvalue() == bytes(5))


def test_write_output_seekable_file(tmp_path):
    path = tmp_path / "out.bin"
    with open(path, "wb") as f:
        write_output(f, b"\xaa", 3)
    assert(path.read_bytes() == b"\x00\x00\x00\xaa")
