# 2023 - LambdaConcept - po@lambdaconcept.com

__all__ = [
    "RWError", "UsageError", "ModeError", "BusError", "FileAccessError",
    "ChipAddressError", "LengthError", "OffsetError", "StartAddressError",
    "TransferError",
]


class RWError(Exception):
    """Base error, ``exit_code`` is the process exit status."""
    exit_code = 1


class UsageError(RWError):
    exit_code = 1


class ModeError(RWError):
    exit_code = 2


class BusError(RWError):
    exit_code = 3


class FileAccessError(RWError):
    exit_code = 4


class ChipAddressError(RWError):
    exit_code = 5


class LengthError(RWError):
    exit_code = 6


class OffsetError(RWError):
    exit_code = 7


class StartAddressError(RWError):
    exit_code = 8


class TransferError(RWError):
    exit_code = 9
