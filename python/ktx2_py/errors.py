# ktx2_py/errors.py
#
# Error kinds raised by the container codec. Every error records the field
# it concerns and the expected/actual values so callers can render a precise
# diagnostic without re-parsing the buffer.


class FormatError(ValueError):
    """
    Base class for all malformed-container errors.

    Attributes:
        field    : name of the header/DFD/index field involved (or None)
        expected : what the codec required (value, bound or description)
        actual   : what the buffer declared
    """

    kind = "FormatError"

    def __init__(self, message, field=None, expected=None, actual=None):
        self.field = field
        self.expected = expected
        self.actual = actual

        details = []
        if field is not None:
            details.append(f"field={field}")
        if expected is not None:
            details.append(f"expected={expected}")
        if actual is not None:
            details.append(f"actual={actual}")

        if details:
            message = f"{message} ({', '.join(details)})"

        super().__init__(f"{self.kind}: {message}")


class BadMagic(FormatError):
    kind = "BadMagic"


class Truncated(FormatError):
    kind = "Truncated"


class OffsetOutOfRange(FormatError):
    kind = "OffsetOutOfRange"


class SizeMismatch(FormatError):
    kind = "SizeMismatch"


class CorruptIndex(FormatError):
    kind = "CorruptIndex"


class UnsupportedScheme(FormatError):
    kind = "UnsupportedScheme"


class BadHeader(FormatError):
    kind = "BadHeader"


class BadDescriptor(FormatError):
    kind = "BadDescriptor"


class InvalidAlignment(FormatError):
    kind = "InvalidAlignment"
