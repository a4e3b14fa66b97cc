# 2023 - LambdaConcept - po@lambdaconcept.com

import io
import logging
import time

from .errors import FileAccessError, TransferError
from .utils import parse_dump


__all__ = ["read_input", "write_output", "write_chip", "read_chip"]


CHIP_SIZE = 256


def read_input(stream, offset, length):
    """Return up to ``length`` bytes of ``stream`` starting at ``offset``.

    Pipes are not seekable, the leading bytes are read and dropped instead.
    """
    try:
        if stream.seekable():
            stream.seek(offset, io.SEEK_SET)
        else:
            while offset > 0:
                skipped = stream.read(min(offset, io.DEFAULT_BUFFER_SIZE))
                if not skipped:
                    return b""
                offset -= len(skipped)

        data = bytearray()
        while len(data) < length:
            chunk = stream.read(length - len(data))
            if not chunk:
                break
            data += chunk
    except OSError as e:
        raise FileAccessError(f"Can not read input: {e}")

    return bytes(data)


def write_output(stream, data, offset):
    """Write ``data`` at position ``offset``, zero filling the gap."""
    try:
        if stream.seekable():
            end = stream.seek(0, io.SEEK_END)
            if end < offset:
                stream.write(bytes(offset - end))
            stream.seek(offset, io.SEEK_SET)
        else:
            stream.write(bytes(offset))
        stream.write(data)
        stream.flush()
    except OSError as e:
        raise FileAccessError(f"Can not write output: {e}")


def write_chip(bus, chip, data, start=0x00, delay=0.1):
    """Write ``data`` one byte at a time from data address ``start``."""
    if start + len(data) > CHIP_SIZE:
        raise TransferError(f"{len(data)} bytes from 0x{start:02X} do not fit "
                            f"in a {CHIP_SIZE} bytes chip")

    for i, value in enumerate(data):
        address = start + i
        logging.info(f"Writing byte '0x{value:02X}' to bus {bus.name}, "
                     f"chip-address '0x{chip:02x}', data-address '0x{address:02X}'")
        bus.write_byte_data(chip, address, value)

        if i < len(data) - 1:
            time.sleep(delay)

    return len(data)


def read_chip(bus, chip):
    """Dump the whole chip, return the dump text and the decoded bytes."""
    text = bus.dump(chip)
    try:
        data = parse_dump(text, size=CHIP_SIZE)
    except ValueError as e:
        raise TransferError(f"Cannot decode dump of chip 0x{chip:02x}: {e}")
    return text, data
