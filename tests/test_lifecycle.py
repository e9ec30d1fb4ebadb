"""Restart-handler override and deferred restore lifecycle."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from core.errors import SettingsStoreError
from core.lifecycle import RESTART_HANDLER, RestoreExtension
from core.overrides import OverrideRegistry, save_before
from identity.resolver import IdentityResolver
from identity.strategies import DescriptionStrategy
from os_controller.base_controller import Rect
from os_controller.shell_host import ShellHost
from persistence.settings_store import InMemorySettingsStore
from persistence.state_store import StateStore


def test_save_before_saves_then_delegates_with_same_arguments() -> None:
    calls: list[str] = []

    def original(params: dict, *, flag: bool = False) -> str:
        calls.append("original")
        return f"restarted {params['reason']} {flag}"

    wrapped = save_before(original, lambda: calls.append("save"))

    assert wrapped({"reason": "update"}, flag=True) == "restarted update True"
    assert calls == ["save", "original"]
    assert wrapped.__wrapped__ is original


def test_save_before_without_original_still_saves() -> None:
    save = MagicMock()

    assert save_before(None, save)("anything") is None
    save.assert_called_once_with()


def test_failing_save_does_not_block_original() -> None:
    original = MagicMock(return_value="ok")
    wrapped = save_before(original, MagicMock(side_effect=OSError("disk full")))

    assert wrapped() == "ok"
    original.assert_called_once_with()


def test_registry_restores_exact_previous_handler() -> None:
    original = MagicMock()
    table = {"restart": original}
    registry = OverrideRegistry(table)

    registry.install("restart", lambda prev: save_before(prev, MagicMock()))
    assert table["restart"] is not original
    registry.remove("restart")

    assert table["restart"] is original


def test_registry_removes_handler_that_was_absent() -> None:
    table: dict = {}
    registry = OverrideRegistry(table)

    registry.install("restart", lambda prev: save_before(prev, MagicMock()))
    assert "restart" in table
    registry.remove("restart")

    assert "restart" not in table


def test_registry_refuses_double_install() -> None:
    registry = OverrideRegistry({})
    registry.install("restart", lambda prev: MagicMock())

    with pytest.raises(ValueError):
        registry.install("restart", lambda prev: MagicMock())


def _extension(loop, source, settings, original=None, delay=0.01) -> tuple[RestoreExtension, ShellHost]:
    handlers = {RESTART_HANDLER: original} if original is not None else {}
    host = ShellHost(source, loop, handlers=handlers)
    extension = RestoreExtension(
        host,
        build_state_store=lambda: StateStore(settings, IdentityResolver([DescriptionStrategy()])),
        restore_delay=delay,
    )
    return extension, host


def test_restart_saves_state_then_runs_original(make_window, make_source) -> None:
    loop = asyncio.new_event_loop()
    try:
        settings = InMemorySettingsStore()
        source = make_source([make_window(description="0x1", rect=Rect(1, 2, 3, 4))])
        original = MagicMock(return_value="bye")
        extension, host = _extension(loop, source, settings, original=original)

        extension.enable()
        assert host.invoke(RESTART_HANDLER, {"mode": "soft"}) == "bye"

        original.assert_called_once_with({"mode": "soft"})
        assert '"id":"0x1"' in settings.get("saved-state")

        extension.disable()
        assert host.handlers[RESTART_HANDLER] is original
    finally:
        loop.close()


def test_deferred_restore_runs_once_after_delay(make_window, make_source) -> None:
    loop = asyncio.new_event_loop()
    try:
        settings = InMemorySettingsStore(
            {"saved-state": '[{"id":"0x1","x":10,"y":20,"width":30,"height":40}]'}
        )
        window = make_window(description="0x1")
        extension, _ = _extension(loop, make_source([window]), settings)

        extension.enable()
        assert window.moves == []
        loop.run_until_complete(asyncio.sleep(0.05))
        loop.run_until_complete(asyncio.sleep(0.05))

        assert window.moves == [Rect(10, 20, 30, 40)]
        assert extension.context.last_report.restored == ["0x1"]
        assert extension.context.restore_handle is None
        extension.disable()
    finally:
        loop.close()


def test_disable_before_delay_cancels_restore(make_window, make_source) -> None:
    loop = asyncio.new_event_loop()
    try:
        settings = InMemorySettingsStore(
            {"saved-state": '[{"id":"0x1","x":10,"y":20,"width":30,"height":40}]'}
        )
        window = make_window(description="0x1")
        extension, host = _extension(loop, make_source([window]), settings, delay=0.02)

        extension.enable()
        extension.disable()
        loop.run_until_complete(asyncio.sleep(0.05))

        assert window.moves == []
        assert extension.enabled is False
        assert RESTART_HANDLER not in host.handlers
    finally:
        loop.close()


def test_corrupt_state_is_logged_not_raised(make_window, make_source, caplog) -> None:
    loop = asyncio.new_event_loop()
    try:
        settings = InMemorySettingsStore({"saved-state": "{broken"})
        extension, _ = _extension(loop, make_source([make_window()]), settings, delay=0.0)

        extension.enable()
        loop.run_until_complete(asyncio.sleep(0.01))

        assert "Not restoring windows" in caplog.text
        extension.disable()
    finally:
        loop.close()


def test_enable_twice_keeps_single_override(make_source) -> None:
    loop = asyncio.new_event_loop()
    try:
        original = MagicMock()
        extension, host = _extension(loop, make_source(), InMemorySettingsStore(), original=original)

        extension.enable()
        wrapped = host.handlers[RESTART_HANDLER]
        extension.enable()

        assert host.handlers[RESTART_HANDLER] is wrapped
        extension.disable()
        extension.disable()
        assert host.handlers[RESTART_HANDLER] is original
    finally:
        loop.close()


def test_deferred_restore_without_display_logs_warning(make_source, caplog) -> None:
    loop = asyncio.new_event_loop()
    try:
        source = make_source()
        source.list_windows = MagicMock(side_effect=RuntimeError("No X11 display available"))
        settings = InMemorySettingsStore(
            {"saved-state": '[{"id":"0x1","x":10,"y":20,"width":30,"height":40}]'}
        )
        extension, _ = _extension(loop, source, settings, delay=0.0)
        exceptions: list[dict] = []
        loop.set_exception_handler(lambda _loop, ctx: exceptions.append(ctx))

        extension.enable()
        loop.run_until_complete(asyncio.sleep(0.01))

        assert exceptions == []
        assert "cannot enumerate them" in caplog.text
        assert extension.context.last_report is None
        extension.disable()
    finally:
        loop.close()


def test_deferred_restore_with_broken_settings_database_logs_warning(make_window, make_source, caplog) -> None:
    loop = asyncio.new_event_loop()
    try:
        settings = MagicMock()
        settings.get.side_effect = SettingsStoreError("Settings database settings.db failed: disk I/O error")
        window = make_window(description="0x1", rect=Rect(1, 2, 3, 4))
        extension, _ = _extension(loop, make_source([window]), settings, delay=0.0)

        extension.enable()
        loop.run_until_complete(asyncio.sleep(0.01))

        assert "disk I/O error" in caplog.text
        assert window.moves == []
        extension.disable()
    finally:
        loop.close()
