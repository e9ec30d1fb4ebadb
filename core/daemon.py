"""Long-running mode: restore after start, save when asked to restart.

SIGHUP plays the role of the shell's restart request. The wrapped restart
handler saves window state and then runs the original handler, which stops
the loop and optionally launches ``daemon.restart_command``. SIGINT and
SIGTERM stop without saving.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
import signal
import subprocess
from typing import Any

from core.lifecycle import DEFAULT_RESTORE_DELAY, RESTART_HANDLER, RestoreExtension
from core.orchestrator import Orchestrator, RuntimeBundle
from os_controller.shell_host import ShellHost

logger = logging.getLogger("rar.daemon")


def _launch(command: str) -> None:
    logger.info("Running restart command: %s", command)
    try:
        subprocess.Popen(shlex.split(command), stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except (OSError, ValueError) as exc:
        logger.error("Failed to run restart command '%s': %s", command, exc)


async def serve(bundle: RuntimeBundle) -> None:
    """Run until a restart request or a termination signal arrives."""
    loop = asyncio.get_running_loop()
    stopped = asyncio.Event()
    daemon_cfg = bundle.config.get("daemon", {})
    restart_command = daemon_cfg.get("restart_command")

    def restart(*_args: Any) -> None:
        try:
            if restart_command:
                _launch(str(restart_command))
        finally:
            stopped.set()

    host = ShellHost(bundle.window_source, loop, handlers={RESTART_HANDLER: restart})
    extension = RestoreExtension(
        host,
        build_state_store=lambda: Orchestrator.build_state_store(
            bundle.config,
            bundle.settings,
            Orchestrator.build_resolver(bundle.config, bundle.runner),
        ),
        restore_delay=float(
            bundle.config.get("restore", {}).get("delay_seconds", DEFAULT_RESTORE_DELAY)
        ),
    )
    extension.enable()
    loop.add_signal_handler(signal.SIGHUP, host.invoke, RESTART_HANDLER)
    loop.add_signal_handler(signal.SIGINT, stopped.set)
    loop.add_signal_handler(signal.SIGTERM, stopped.set)
    try:
        await stopped.wait()
    finally:
        for sig in (signal.SIGHUP, signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        extension.disable()


def run_daemon(bundle: RuntimeBundle) -> None:
    asyncio.run(serve(bundle))
