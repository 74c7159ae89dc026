"""Event channel and printer strategies."""

from script_exec.output.manager import OutputManager
from script_exec.output.printers import (
    EmojiPrinter,
    PlainPrinter,
    Printer,
    PrinterStyle,
    PrometheusPrinter,
    build_printer,
)

__all__ = [
    "EmojiPrinter",
    "OutputManager",
    "PlainPrinter",
    "Printer",
    "PrinterStyle",
    "PrometheusPrinter",
    "build_printer",
]
