# 2023 - LambdaConcept - po@lambdaconcept.com

import sys
import math
import logging
from argparse import ArgumentParser
from contextlib import contextmanager

import serial

from .errors import *
from .i2c.bus import I2CBus
from .i2c.tools import I2CTools
from .transfer import *
from .validate import *


__all__ = ["main"]


DEFAULT_CHIP_ADDR   = "0x50"
DEFAULT_START_ADDR  = "0x00"
DEFAULT_LENGTH      = "128"
DEFAULT_OFFSET      = "0"
DEFAULT_DELAY       = 0.1
DEFAULT_BAUDRATE    = 3000000

MODES = {
    "-h": "help",   "--help": "help",
    "-r": "read",   "--read": "read",
    "-w": "write",  "--write": "write",
}


class OptionParser(ArgumentParser):
    def error(self, message):
        raise UsageError(f"unrecognized mode option: {message}")


def build_parser():
    parser = OptionParser(prog="rw-i2c", add_help=False, allow_abbrev=False,
                          usage="%(prog)s [mode] [options]",
                          description="Read or write the bytes of an I2C chip "
                                      "from or into a binary file.")

    modes = parser.add_argument_group("modes (must come first)")
    modes.add_argument("-h", "--help", action="store_true",
                       help="print this help message")
    modes.add_argument("-r", "--read", action="store_true",
                       help="read data from the chip into a file")
    modes.add_argument("-w", "--write", action="store_true",
                       help="write data from a file to the chip")

    options = parser.add_argument_group("options")
    options.add_argument("-b", "--bus", metavar="<bus_number>",
                         help="i2c communication bus, as listed by 'i2cdetect -l'")
    options.add_argument("-B", "--bridge", metavar="<port>",
                         help="serial port of an i2c bridge, instead of --bus")
    options.add_argument("--baudrate", type=int, default=DEFAULT_BAUDRATE,
                         help="bridge baudrate (default: %(default)s)")
    options.add_argument("-c", "--chip_addr", metavar="<hex_addr>",
                         default=DEFAULT_CHIP_ADDR,
                         help="chip address (default: %(default)s)")
    options.add_argument("-l", "--length", metavar="<size>",
                         default=DEFAULT_LENGTH,
                         help="length in bytes (default: %(default)s)")
    options.add_argument("-o", "--offset", metavar="<bytes>",
                         default=DEFAULT_OFFSET,
                         help="offset in bytes into the file (default: %(default)s)")
    options.add_argument("-f", "--file", metavar="<filename>",
                         help="file to be written to the chip (default: stdin), "
                              "or file to read the chip into (required), "
                              "'-' for the standard streams")
    options.add_argument("-d", "--delay", metavar="<seconds>", type=float,
                         default=DEFAULT_DELAY,
                         help="pause between two byte writes (default: %(default)s)")
    options.add_argument("-q", "--quiet", action="store_true",
                         help="only report errors")

    write = parser.add_argument_group("options valid only for 'write' mode")
    write.add_argument("-s", "--start_addr", metavar="<hex_addr>",
                       help=f"start address (default: {DEFAULT_START_ADDR})")

    return parser


def parse_args(argv):
    """Return ``(mode, args)``, ``args`` is None for the help mode."""
    parser = build_parser()

    if not argv:
        return "help", None

    mode = MODES.get(argv[0])
    if mode is None:
        raise UsageError(f"unknown mode '{argv[0]}'")

    if mode == "help":
        if len(argv) > 1:
            raise UsageError("mode 'HELP' does not support options")
        return mode, None

    if len(argv) < 2:
        raise ModeError("working mode needs options")

    args = parser.parse_args(argv[1:])
    if args.help or args.read or args.write:
        raise UsageError("mode has to be the first argument")

    if args.start_addr is not None and mode == "read":
        raise UsageError("mode 'READ' does not support start addressing")

    if not math.isfinite(args.delay) or args.delay < 0:
        raise UsageError(f"delay '{args.delay}' has to be a non-negative number of seconds")

    if args.baudrate <= 0:
        raise UsageError(f"baudrate '{args.baudrate}' has to be a positive number")

    return mode, args


@contextmanager
def open_bus(args):
    if args.bridge is None:
        yield I2CTools(args.bus)
        return

    try:
        dev = serial.Serial(args.bridge, baudrate=args.baudrate, timeout=1)
    except (serial.SerialException, ValueError) as e:
        raise BusError(f"Can not open i2c bridge '{args.bridge}': {e}")

    with dev:
        dev.reset_input_buffer()
        yield I2CBus(dev)


def do_write(bus, chip, length, offset, start, args):
    try:
        if args.file in (None, "-"):
            data = read_input(sys.stdin.buffer, offset, length)
        else:
            with open(args.file, "rb") as f:
                data = read_input(f, offset, length)
    except OSError as e:
        raise FileAccessError(f"Can not read {args.file}: {e}")

    write_chip(bus, chip, data, start=start, delay=args.delay)

    logging.info(f"Writing done, here is the dump of bus {bus.name}, chip 0x{chip:02x}:")
    sys.stdout.write(bus.dump(chip))


def do_read(bus, chip, length, offset, args):
    to_stdout = (args.file == "-")
    text, data = read_chip(bus, chip)

    logging.info(f"Here is the dump of bus {bus.name}, chip 0x{chip:02x}:")
    # Keep stdout for the binary data
    (sys.stderr if to_stdout else sys.stdout).write(text)

    logging.info(f"Now we write it to '{args.file}' in binary format, "
                 f"{length} bytes at offset {offset}")
    data = data[:length]
    if to_stdout:
        write_output(sys.stdout.buffer, data, offset)
        return

    try:
        with open(args.file, "wb") as f:
            write_output(f, data, offset)
    except OSError as e:
        raise FileAccessError(f"Can not write {args.file}: {e}")


def run(argv):
    mode, args = parse_args(argv)
    if mode == "help":
        build_parser().print_help()
        return 0

    logging.getLogger().setLevel(logging.WARNING if args.quiet else logging.INFO)

    args.bus = check_bus(args.bus, args.bridge)
    start_addr = args.start_addr if args.start_addr is not None else DEFAULT_START_ADDR
    chip, length, offset, start = check_formats(args.chip_addr, args.length,
                                                args.offset, start_addr)

    if mode == "write":
        check_input(args.file)
    else:
        check_output(args.file)

    with open_bus(args) as bus:
        if mode == "write":
            do_write(bus, chip, length, offset, start, args)
        else:
            do_read(bus, chip, length, offset, args)

    return 0


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    logging.basicConfig(format="%(message)s", level=logging.INFO)

    try:
        return run(argv)
    except RWError as e:
        logging.error(f"ERR: {e}")
        if isinstance(e, UsageError):
            build_parser().print_help(sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
