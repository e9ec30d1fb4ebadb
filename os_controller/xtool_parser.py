"""Parsers for the text output of the X11 command line tools.

``xwininfo``, ``xprop`` and ``wmctrl`` only offer human-oriented text, so
everything here is best-effort scraping. Every parser returns ``None`` (or an
empty list) rather than raising when the output does not look as expected.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from os_controller.base_controller import Rect, WindowType

logger = logging.getLogger("rar.xtool_parser")

_HEX_ID = re.compile(r"0x[0-9a-f]+")
_CHILDREN_MARKER = re.compile(r"child(?:ren)?:")
_WM_NAME = re.compile(r'_NET_WM_NAME(?:\(\w+\))? = "((?:[^\\"]|\\.)*)"')
_WINDOW_TYPE = re.compile(r"_NET_WM_WINDOW_TYPE\(ATOM\) = ([A-Z_, ]+)")
_ESCAPE = re.compile(r"\\(.)")

_TYPE_ATOMS = {
    "NORMAL": WindowType.NORMAL,
    "DESKTOP": WindowType.DESKTOP,
    "DOCK": WindowType.DOCK,
    "DIALOG": WindowType.DIALOG,
    "UTILITY": WindowType.UTILITY,
    "SPLASH": WindowType.SPLASH,
    "MENU": WindowType.MENU,
    "DROPDOWN_MENU": WindowType.MENU,
    "POPUP_MENU": WindowType.MENU,
    "TOOLBAR": WindowType.TOOLBAR,
}


@dataclass
class WmctrlEntry:
    """One line of ``wmctrl -l -G -p`` output."""

    xid: str
    desktop: int
    pid: int
    rect: Rect
    title: str | None


def find_hex_id(text: str) -> str | None:
    """Return the first ``0x``-prefixed hexadecimal id in *text*."""
    match = _HEX_ID.search(text)
    return match.group(0) if match else None


def find_all_hex_ids(text: str) -> list[str]:
    return _HEX_ID.findall(text)


def find_titled_id(tree_output: str, title: str) -> str | None:
    """Find the id printed immediately before the quoted *title*.

    In ``xwininfo -children`` output every window line reads
    ``0x4a00003 "Title": ("app" "App") ...``. For frameless windows the
    matching line is the header of the queried window itself.
    """
    pattern = re.compile(r'(0x[0-9a-f]+) +"%s"' % re.escape(title))
    match = pattern.search(tree_output)
    return match.group(1) if match else None


def find_first_child_id(tree_output: str) -> str | None:
    """Return the first id listed after the ``N child(ren):`` marker."""
    parts = _CHILDREN_MARKER.split(tree_output, maxsplit=1)
    if len(parts) < 2:
        return None
    return find_hex_id(parts[1])


def parse_wm_name(prop_output: str) -> str | None:
    """Extract and unescape the ``_NET_WM_NAME`` value from ``xprop`` output."""
    match = _WM_NAME.search(prop_output)
    if not match:
        return None
    return _ESCAPE.sub(r"\1", match.group(1))


def has_marker(prop_output: str, marker: str) -> bool:
    """True when ``xprop`` printed a value for the CARDINAL *marker* property."""
    return f"{marker}(CARDINAL)" in prop_output


def parse_window_type(prop_output: str) -> WindowType:
    """Map ``_NET_WM_WINDOW_TYPE`` to a ``WindowType``.

    Windows without the property are normal windows as far as the window
    manager is concerned.
    """
    match = _WINDOW_TYPE.search(prop_output)
    if not match:
        return WindowType.NORMAL
    first_atom = match.group(1).split(",")[0].strip()
    suffix = first_atom.removeprefix("_NET_WM_WINDOW_TYPE_")
    return _TYPE_ATOMS.get(suffix, WindowType.UNKNOWN)


def parse_wmctrl_list(output: str) -> list[WmctrlEntry]:
    """Parse ``wmctrl -l -G -p`` lines.

    Columns: id, desktop, pid, x, y, width, height, client machine, title.
    The title may be missing and may contain spaces.
    """
    entries: list[WmctrlEntry] = []
    for line in output.splitlines():
        fields = line.split(None, 8)
        if len(fields) < 8 or not _HEX_ID.fullmatch(fields[0].lower()):
            continue
        try:
            desktop, pid, x, y, width, height = (int(v) for v in fields[1:7])
        except ValueError:
            logger.debug("Skipping unparsable wmctrl line: %r", line)
            continue
        title = fields[8] if len(fields) > 8 else None
        entries.append(
            WmctrlEntry(
                xid=_normalize_hex(fields[0]),
                desktop=desktop,
                pid=pid,
                rect=Rect(x, y, width, height),
                title=title,
            )
        )
    return entries


def _normalize_hex(value: str) -> str:
    # wmctrl zero-pads ids (0x03a00003); xprop and xwininfo do not.
    return hex(int(value, 16))
