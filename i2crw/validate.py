# 2023 - LambdaConcept - po@lambdaconcept.com

import os
import re

from .errors import *
from .i2c.bus import bridge_exists
from .i2c.tools import list_buses


__all__ = [
    "check_dec_format", "check_hex_format",
    "check_bus", "check_formats", "check_input", "check_output",
]


DEC_FORMAT = re.compile(r"[0-9]+")
HEX_FORMAT = re.compile(r"0x[0-9a-fA-F]+")


def check_dec_format(value):
    return value is not None and DEC_FORMAT.fullmatch(value) is not None


def check_hex_format(value):
    return value is not None and HEX_FORMAT.fullmatch(value) is not None


def check_bus(bus, bridge=None):
    """Make sure the bus (or the bridge port) exists on this host.

    Returns the bus number as i2c-tools expects it, "1" for "i2c-1".
    """
    if bridge is not None:
        if not bridge_exists(bridge):
            raise BusError(f"i2c bridge '{bridge}' was not found")
        return None

    if not bus:
        raise BusError("i2c bus has to be specified")

    # i2cdetect -l names buses "i2c-N"
    name = bus[len("i2c-"):] if bus.startswith("i2c-") else bus
    try:
        buses = list_buses()
    except TransferError as e:
        raise BusError(f"Can not list i2c buses: {e}")
    if name not in buses:
        raise BusError(f"i2c bus 'i2c-{name}' was not found")
    return name


def check_formats(chip_addr, length, offset, start_addr):
    """Check the numeric options, return them as integers.

    The checks run in exit code order: chip address, length, offset, start
    address.
    """
    if not check_hex_format(chip_addr):
        raise ChipAddressError(f"chip address '{chip_addr}' has to be in hex format")
    chip = int(chip_addr, 16)
    if chip > 0x7f:
        raise ChipAddressError(f"chip address '{chip_addr}' does not fit in 7 bits")

    if not check_dec_format(length):
        raise LengthError(f"bytes count '{length}' has to be in decimal format")

    if not check_dec_format(offset):
        raise OffsetError(f"byte offset '{offset}' has to be in decimal format")

    if not check_hex_format(start_addr):
        raise StartAddressError(f"start address '{start_addr}' has to be in hex format")
    start = int(start_addr, 16)
    if start > 0xff:
        raise StartAddressError(f"start address '{start_addr}' does not fit in a byte")

    return chip, int(length), int(offset), start


def check_input(filename):
    # None or "-" reads stdin
    if filename in (None, "-"):
        return
    if not os.path.isfile(filename) or not os.access(filename, os.R_OK):
        raise FileAccessError(f"Can not read {filename}")


def check_output(filename):
    if not filename:
        raise FileAccessError("Output file missing")
    if filename == "-":
        return

    outpath = os.path.dirname(filename) or "."
    if not os.path.isdir(outpath) or not os.access(outpath, os.W_OK):
        raise FileAccessError("Output directory is not existing or is not writable")
