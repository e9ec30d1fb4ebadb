"""Window identifier strategies, ordered from cheapest to most expensive."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from core.errors import ResolutionFailure, ToolInvocationFailure
from executor.command_executor import CommandRunner
from os_controller.base_controller import WindowHandle
from os_controller import xtool_parser

logger = logging.getLogger("rar.identity")


class IdentityStrategy(ABC):
    """One step of the identifier cascade."""

    name: str = "base"

    @abstractmethod
    def resolve(self, handle: WindowHandle) -> str:
        """Return an identifier or raise ``ResolutionFailure``."""


class DescriptionStrategy(IdentityStrategy):
    """Pull the X id out of the host's description string.

    Costs no external command, so it always runs first.
    """

    name = "description"

    def resolve(self, handle: WindowHandle) -> str:
        try:
            description = handle.description()
        except Exception as exc:
            # Hosts fail to convert titles with invalid UTF-8 here.
            raise ResolutionFailure(f"description unavailable: {exc}") from exc
        xid = xtool_parser.find_hex_id(description or "")
        if xid is None:
            raise ResolutionFailure("no hex id in description")
        return xid


class TreeStrategy(IdentityStrategy):
    """Ask ``xwininfo`` for the children of the compositing surface."""

    name = "tree"

    def __init__(self, run: CommandRunner, xwininfo: str = "xwininfo") -> None:
        self.run = run
        self.xwininfo = xwininfo

    def resolve(self, handle: WindowHandle) -> str:
        surface = handle.compositor_xid()
        if surface is None:
            raise ResolutionFailure("no compositing surface id")
        output = self.run([self.xwininfo, "-children", "-id", hex(surface)])

        title = handle.title
        if title:
            xid = xtool_parser.find_titled_id(output, title)
            if xid:
                return xid
        xid = xtool_parser.find_first_child_id(output)
        if xid is None:
            raise ResolutionFailure("xwininfo listed no children")
        return xid


class ClientListStrategy(IdentityStrategy):
    """Enumerate ``_NET_CLIENT_LIST`` and compare ``_NET_WM_NAME`` to the title.

    Windows carrying ``marker_property`` are already owned by another tool
    and are skipped.
    """

    name = "client_list"

    def __init__(
        self,
        run: CommandRunner,
        xprop: str = "xprop",
        marker_property: str = "_NO_TITLE_BAR_ORIGINAL_STATE",
    ) -> None:
        self.run = run
        self.xprop = xprop
        self.marker_property = marker_property

    def resolve(self, handle: WindowHandle) -> str:
        title = handle.title
        if not title:
            raise ResolutionFailure("window has no title to match")
        output = self.run([self.xprop, "-root", "_NET_CLIENT_LIST"])
        candidates = xtool_parser.find_all_hex_ids(output)
        if not candidates:
            raise ResolutionFailure("_NET_CLIENT_LIST is empty")

        for xid in candidates:
            try:
                props = self.run([self.xprop, "-id", xid, "_NET_WM_NAME", self.marker_property])
            except ToolInvocationFailure as exc:
                logger.debug("Skipping %s: %s", xid, exc)
                continue
            if xtool_parser.has_marker(props, self.marker_property):
                continue
            if xtool_parser.parse_wm_name(props) == title:
                return xid
        raise ResolutionFailure(f"no client window named {title!r}")


def build_strategies(
    names: list[str],
    run: CommandRunner,
    commands_cfg: dict[str, object] | None = None,
    marker_property: str = "_NO_TITLE_BAR_ORIGINAL_STATE",
) -> list[IdentityStrategy]:
    """Instantiate strategies in the configured order."""
    commands_cfg = commands_cfg or {}
    factories = {
        DescriptionStrategy.name: lambda: DescriptionStrategy(),
        TreeStrategy.name: lambda: TreeStrategy(
            run, xwininfo=str(commands_cfg.get("xwininfo", "xwininfo"))
        ),
        ClientListStrategy.name: lambda: ClientListStrategy(
            run,
            xprop=str(commands_cfg.get("xprop", "xprop")),
            marker_property=marker_property,
        ),
    }
    strategies: list[IdentityStrategy] = []
    for name in names:
        factory = factories.get(name)
        if factory is None:
            raise ValueError(f"Unknown identity strategy: {name}")
        strategies.append(factory())
    return strategies
