# 2023 - LambdaConcept - po@lambdaconcept.com

__all__ = ["hexdump", "parse_dump"]


ROW = 16
HEADER = "     " + "".join(f"{i:x}  " for i in range(ROW)) + "  0123456789abcdef"


def _printable(b):
    if b in (0x00, 0xff):
        return "."
    if b < 32 or b >= 127:
        return "?"
    return chr(b)


def hexdump(data):
    """Render bytes as an i2cdump style table."""
    lines = [HEADER]

    for base in range(0, len(data), ROW):
        row = data[base:base+ROW]
        cells = "".join(f"{b:02x} " for b in row)
        cells += "   " * (ROW - len(row))
        chars = "".join(_printable(b) for b in row)
        lines.append(f"{base:02x}: {cells}   {chars}")

    return "\n".join(lines) + "\n"


def parse_dump(text, size=None):
    """Decode the table printed by ``i2cdump`` (or ``hexdump``) into bytes.

    Lines that are not table rows (header, warnings) are ignored. Raises
    ValueError on unreadable cells (``XX``), on missing rows, and on a
    table that is not ``size`` bytes long when ``size`` is given.
    """
    data = bytearray()

    for line in text.splitlines():
        label, sep, _ = line.partition(": ")
        if not sep or len(label) != 2:
            continue
        try:
            base = int(label, 16)
        except ValueError:
            continue

        if base != len(data):
            raise ValueError(f"Unexpected row '{label}' at offset {len(data):#04x}")

        # The ascii column starts after the 16 cells
        for cell in line[4:4+3*ROW].split():
            if cell.upper() == "XX":
                raise ValueError(f"Unreadable byte at offset {len(data):#04x}")
            data.append(int(cell, 16))

    if not data:
        raise ValueError("No dump rows found")
    if size is not None and len(data) != size:
        raise ValueError(f"Truncated dump, {len(data)} of {size} bytes")

    return bytes(data)
