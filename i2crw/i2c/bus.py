# 2023 - LambdaConcept - po@lambdaconcept.com

import os

from serial.tools import list_ports

from ..errors import TransferError
from ..utils import hexdump


__all__ = ["I2CBus", "list_bridges", "bridge_exists"]


I2C_WRITE   = 0
I2C_READ    = 1

STATUS_OK   = 0

CHIP_SIZE   = 256
BLOCK_SIZE  = 16


def list_bridges():
    return [port.device for port in list_ports.comports()]


def bridge_exists(port):
    return port in list_bridges() or os.path.exists(port)


class I2CBus:
    """Chip access through a serial I2C bridge.

    Every transaction is a ``[addr << 1 | rw, size, payload...]`` request,
    answered by a single status byte. Reads are followed by ``size`` bytes
    of data.
    """
    def __init__(self, dev, reg_addr_width=8, name=None):
        self.dev = dev
        self.name = name or getattr(dev, "port", None) or "bridge"
        self.reg_addr_width = reg_addr_width

    def _reg_addr(self, reg):
        reg_addr_size = self.reg_addr_width // 8
        reg_addr_array = []
        for _ in range(reg_addr_size):
            reg_addr_array.append(reg & 0xff)
            reg = reg >> 8
        reg_addr_array.reverse()
        return reg_addr_array

    def _status(self, addr):
        status = self.dev.read(1)
        if len(status) != 1:
            raise TransferError(f"No answer from bridge for chip 0x{addr:02x}")
        if status[0] != STATUS_OK:
            raise TransferError(f"Chip 0x{addr:02x} did not acknowledge")

    def write_byte_data(self, addr, reg, data):
        self.write_block_data(addr, reg, [data])

    def write_block_data(self, addr, reg, data):
        array = self._reg_addr(reg) + list(data)

        # write register address and data
        buffer = bytearray([(addr << 1) | I2C_WRITE, len(array), *array])
        self.dev.write(buffer)
        self._status(addr)

        return len(data)

    def read_block_data(self, addr, reg, length):
        reg_addr_array = self._reg_addr(reg)

        # write register address
        buffer = bytearray([(addr << 1) | I2C_WRITE, len(reg_addr_array), *reg_addr_array])
        self.dev.write(buffer)
        self._status(addr)

        # read block
        buffer = bytearray([(addr << 1) | I2C_READ, length])
        self.dev.write(buffer)
        self._status(addr)

        block = bytes(self.dev.read(length))
        if len(block) != length:
            raise TransferError(f"Short read from chip 0x{addr:02x}: "
                                f"{len(block)} of {length} bytes")
        return block

    def read_chip(self, addr):
        data = bytearray()
        for reg in range(0, CHIP_SIZE, BLOCK_SIZE):
            data += self.read_block_data(addr, reg, BLOCK_SIZE)
        return bytes(data)

    def dump(self, addr):
        return hexdump(self.read_chip(addr))
