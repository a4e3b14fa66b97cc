# 2023 - LambdaConcept - po@lambdaconcept.com

import logging
import subprocess

from ..errors import TransferError


__all__ = ["I2CTools", "list_buses"]


I2CDETECT   = "i2cdetect"
I2CSET      = "i2cset"
I2CDUMP     = "i2cdump"


def _run(args):
    logging.debug("Running: {}".format(" ".join(args)))
    try:
        res = subprocess.run(args, capture_output=True, text=True)
    except FileNotFoundError:
        raise TransferError(f"'{args[0]}' not found, is i2c-tools installed?")

    if res.returncode != 0:
        raise TransferError("'{}' failed: {}".format(" ".join(args),
                            res.stderr.strip() or f"exit status {res.returncode}"))
    return res.stdout


def list_buses():
    """Return the bus names listed by ``i2cdetect -l`` (``"1"`` for i2c-1)."""
    buses = []
    for line in _run([I2CDETECT, "-l"]).splitlines():
        name, sep, _ = line.partition("\t")
        if sep and name.startswith("i2c-"):
            buses.append(name[len("i2c-"):])
    return buses


class I2CTools:
    """Chip access through the i2c-tools command line utilities."""
    def __init__(self, bus):
        self.bus = str(bus)
        self.name = self.bus

    def write_byte_data(self, addr, reg, data):
        # -y disables the interactive confirmation
        _run([I2CSET, "-y", self.bus, f"0x{addr:02x}", f"0x{reg:02X}", f"0x{data:02X}"])

    def dump(self, addr):
        return _run([I2CDUMP, "-y", self.bus, f"0x{addr:02x}"])
