"""Port monitoring and the command that shows devices found on serial ports."""

from __future__ import annotations

import argparse
import logging
import re
import time
from collections.abc import Callable, Iterable, Sequence

from . import logsetup
from .comport import Clock, PortController, PortWorker, SerialFactory, list_ports
from .device import DeviceController, SensorCollection
from .display import DisplayGroup

logger = logging.getLogger(__name__)

MONITORING_INTERVAL = 10.0
MONITORING_STEPS = 25
TICK_INTERVAL = MONITORING_INTERVAL / MONITORING_STEPS
MESSAGES_LIMIT = 256
POLL_INTERVAL = 0.05


def _append_line(text: str, line: str) -> str:
    return f"{text}{line}\n"


def _remove_line(text: str, line: str) -> str:
    return re.sub(f"({re.escape(line)})\r?\n?", "", text)


def _add_entry(text: str, port_name: str, message: str) -> str:
    base = text if len(text) < MESSAGES_LIMIT else ""
    return f"{base}[{port_name}]-> {message}"


class PortMonitor:
    """Scans for serial ports, connects to new ones and tracks their state.

    Ports that were once active are not reconnected by scanning; they can
    still be connected by hand.
    """

    def __init__(
        self,
        *,
        serial_factory: SerialFactory | None = None,
        port_lister: Callable[[], Iterable[str]] | None = None,
        clock: Clock = time.monotonic,
        on_message: Callable[[str, str], None] | None = None,
        on_port_deactivated: Callable[[str], None] | None = None,
    ) -> None:
        self.controller = PortController(
            serial_factory=serial_factory,
            clock=clock,
            on_activated=self._on_activated,
            on_deactivated=self._on_deactivated,
            on_message=self._on_message,
            on_error=self._on_error,
        )
        self.on_message = on_message
        self.on_port_deactivated = on_port_deactivated
        self.available: list[str] = []
        self.activated: list[str] = []
        self.deactivated: list[str] = []
        self.activated_text = ""
        self.deactivated_text = ""
        self.messages_text = ""
        self.errors_text = ""
        self.progress = 0
        self._port_lister = port_lister or list_ports
        self._count = 100

    def scan(self) -> list[str]:
        """List the ports and connect to each one not seen before."""
        self.available = list(self._port_lister())
        for port_name in self.available:
            if port_name in self.activated or port_name in self.deactivated:
                continue
            self.controller.connect_to_port(port_name)
        return list(self.available)

    def tick(self) -> None:
        """Advance the monitoring progress, scanning once a cycle is complete."""
        if self._count > 100:
            self.scan()
            self._count = 0
        self.progress = self._count
        self._count += 100 // MONITORING_STEPS

    def connect(self, port_name: str) -> PortWorker:
        return self.controller.connect_to_port(port_name)

    def disconnect(self, port_name: str) -> bool:
        return self.controller.disconnect_from_port(port_name)

    def _on_activated(self, port_name: str) -> None:
        self.activated_text = _append_line(self.activated_text, port_name)
        self.deactivated_text = _remove_line(self.deactivated_text, port_name)
        if port_name not in self.activated:
            self.activated.append(port_name)
        self.deactivated = [name for name in self.deactivated if name != port_name]

    def _on_deactivated(self, port_name: str) -> None:
        self.deactivated_text = _append_line(self.deactivated_text, port_name)
        self.activated_text = _remove_line(self.activated_text, port_name)
        if not self.activated_text:
            self.messages_text = ""
        if port_name not in self.deactivated:
            self.deactivated.append(port_name)
        self.activated = [name for name in self.activated if name != port_name]
        if self.on_port_deactivated is not None:
            self.on_port_deactivated(port_name)

    def _on_message(self, port_name: str, message: str) -> None:
        self.messages_text = _add_entry(self.messages_text, port_name, message)
        if self.on_message is not None:
            self.on_message(port_name, message)

    def _on_error(self, port_name: str, error: str) -> None:
        self.errors_text = _add_entry(self.errors_text, port_name, error + "\n")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sensormon", description="Show sensor values read from serial ports."
    )
    parser.add_argument("--config", help="sensor parameter file")
    parser.add_argument(
        "--port", action="append", default=[], help="port to connect at start"
    )
    parser.add_argument(
        "--no-scan", action="store_true", help="do not scan for new ports"
    )
    parser.add_argument("--log-file", help="write the log to this file")
    parser.add_argument(
        "--duration", type=float, help="stop after this many seconds"
    )
    return parser.parse_args(argv)


def _run(monitor: PortMonitor, scan: bool, duration: float | None) -> None:
    start = time.monotonic()
    next_tick = start
    try:
        while duration is None or time.monotonic() - start < duration:
            now = time.monotonic()
            if scan and now >= next_tick:
                monitor.tick()
                next_tick = now + TICK_INTERVAL
            monitor.controller.poll()
            time.sleep(POLL_INTERVAL)
    except KeyboardInterrupt:
        pass
    finally:
        monitor.controller.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the monitor until interrupted or until the duration has passed."""
    args = _parse_args(argv)
    if args.log_file:
        logsetup.init(1, args.log_file)
    try:
        collection = SensorCollection()
        if args.config:
            try:
                collection.load_file(args.config)
            except OSError as exc:
                logger.warning("Cannot access file %s: %s", args.config, exc)

        display = DisplayGroup(
            DeviceController(collection),
            on_command=lambda command: print(f"command: {command}"),
        )

        def show(port_name: str, message: str) -> None:
            print(f"[{port_name}]-> {message.rstrip()}")
            view = display.treat_message(port_name, message)
            if view is not None:
                print(f"  {view.title}: {' '.join(view.device.values)}")

        def forget(port_name: str) -> None:
            print(f"[{port_name}] closed")
            display.remove_device(port_name)

        monitor = PortMonitor(on_message=show, on_port_deactivated=forget)
        for port_name in args.port:
            monitor.connect(port_name)
        _run(monitor, scan=not args.no_scan, duration=args.duration)
    finally:
        if args.log_file:
            logsetup.clean()
    return 0