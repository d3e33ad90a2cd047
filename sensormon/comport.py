"""Serial port workers and the controller that keeps them."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from typing import Any

import serial
from serial.tools import list_ports as _list_ports

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 57600
WATCHDOG_INTERVAL = 25.0
"""Seconds without incoming data after which a port is closed."""
WATCHDOG_MESSAGE = "wdt timeout"
MAX_LINE_BYTES = 255

SerialFactory = Callable[[str, int], Any]
Clock = Callable[[], float]

_SERIAL_ERRORS = (serial.SerialException, OSError, ValueError)


def _open_serial(port_name: str, baudrate: int) -> serial.Serial:
    """Open a port with 8 data bits, no parity, one stop bit, no flow control."""
    return serial.Serial(
        port=port_name,
        baudrate=baudrate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        xonxoff=False,
        rtscts=False,
        dsrdtr=False,
        timeout=0,
    )


def _emit(callback: Callable[..., None] | None, *args: Any) -> None:
    if callback is not None:
        callback(*args)


def list_ports() -> list[str]:
    """Return the names of the serial ports present on the system."""
    return [info.device for info in _list_ports.comports()]


def port_description(port_name: str) -> str:
    """Return the description of a port, or an empty string if it is unknown."""
    for info in _list_ports.comports():
        if port_name in (info.device, info.name):
            return info.description or ""
    return ""


class PortWorker:
    """Reads lines from one serial port and reports what happens to it.

    Events are delivered through the ``on_started``, ``on_message``,
    ``on_error`` and ``on_finished`` callbacks; ``on_message`` receives each
    line with its newline.  The port is closed when it reports an error or
    when nothing arrives within the watchdog interval.
    """

    def __init__(
        self,
        port_name: str,
        baudrate: int = DEFAULT_BAUDRATE,
        *,
        serial_factory: SerialFactory | None = None,
        watchdog_interval: float = WATCHDOG_INTERVAL,
        clock: Clock = time.monotonic,
        on_started: Callable[[str], None] | None = None,
        on_message: Callable[[str], None] | None = None,
        on_error: Callable[[str], None] | None = None,
        on_finished: Callable[[str], None] | None = None,
    ) -> None:
        self.port_name = port_name
        self.baudrate = baudrate
        self.watchdog_interval = watchdog_interval
        self.on_started = on_started
        self.on_message = on_message
        self.on_error = on_error
        self.on_finished = on_finished
        self._factory = serial_factory or _open_serial
        self._clock = clock
        self._port: Any = None
        self._pending = b""
        self._deadline: float | None = None

    @property
    def is_open(self) -> bool:
        return self._port is not None and bool(self._port.is_open)

    def open(self) -> bool:
        """Open the port; on failure report the error and finish."""
        try:
            port = self._factory(self.port_name, self.baudrate)
        except _SERIAL_ERRORS as exc:
            self._fail(str(exc))
            return False
        self._port = port
        port.reset_input_buffer()
        port.reset_output_buffer()
        self._pending = b""
        self._restart_watchdog()
        _emit(self.on_started, self.port_name)
        return True

    def close(self) -> None:
        """Stop the watchdog, close the port and report that it finished."""
        self._shutdown()
        _emit(self.on_finished, self.port_name)

    def write(self, data: str) -> int:
        """Send ``data`` encoded as UTF-8 and return the number of bytes written."""
        if not self.is_open:
            raise RuntimeError(f"port {self.port_name} is not open")
        return self._port.write(data.encode("utf-8"))

    def poll(self) -> list[str]:
        """Read what has arrived, report complete lines and check the watchdog."""
        if not self.is_open:
            return []
        try:
            waiting = self._port.in_waiting
            chunk = self._port.read(waiting) if waiting else b""
        except _SERIAL_ERRORS as exc:
            self._fail(str(exc))
            return []

        messages: list[str] = []
        if chunk:
            self._restart_watchdog()
            self._pending += chunk
            if b"\n" in self._pending:
                messages = list(self._drain())
                for message in messages:
                    _emit(self.on_message, message)

        if self._deadline is not None and self._clock() >= self._deadline:
            _emit(self.on_error, WATCHDOG_MESSAGE)
            self.close()
        return messages

    def _drain(self) -> Iterator[str]:
        while self._pending:
            newline = self._pending.find(b"\n", 0, MAX_LINE_BYTES)
            end = newline + 1 if newline >= 0 else min(len(self._pending), MAX_LINE_BYTES)
            line, self._pending = self._pending[:end], self._pending[end:]
            yield line.decode("utf-8", errors="replace")

    def _restart_watchdog(self) -> None:
        self._deadline = self._clock() + self.watchdog_interval

    def _fail(self, error: str) -> None:
        logger.debug("port %s error: %s", self.port_name, error)
        _emit(self.on_error, error)
        self.close()

    def _shutdown(self) -> None:
        self._deadline = None
        port, self._port = self._port, None
        if port is not None and port.is_open:
            port.close()
        self._pending = b""


class PortController:
    """Keeps a worker for each connected port and relays its events.

    Callbacks: ``on_activated(port)``, ``on_deactivated(port)``,
    ``on_message(port, message)`` and ``on_error(port, error)``.
    """

    def __init__(
        self,
        *,
        serial_factory: SerialFactory | None = None,
        baudrate: int = DEFAULT_BAUDRATE,
        watchdog_interval: float = WATCHDOG_INTERVAL,
        clock: Clock = time.monotonic,
        on_activated: Callable[[str], None] | None = None,
        on_deactivated: Callable[[str], None] | None = None,
        on_message: Callable[[str, str], None] | None = None,
        on_error: Callable[[str, str], None] | None = None,
    ) -> None:
        self.workers: list[PortWorker] = []
        self.baudrate = baudrate
        self.watchdog_interval = watchdog_interval
        self.on_activated = on_activated
        self.on_deactivated = on_deactivated
        self.on_message = on_message
        self.on_error = on_error
        self._factory = serial_factory
        self._clock = clock

    def connect_to_port(self, port_name: str) -> PortWorker:
        """Start a worker on ``port_name`` and open it."""
        worker = PortWorker(
            port_name,
            self.baudrate,
            serial_factory=self._factory,
            watchdog_interval=self.watchdog_interval,
            clock=self._clock,
        )
        worker.on_started = self._activate
        worker.on_finished = lambda name: self._deactivate(worker, name)
        worker.on_message = lambda message: _emit(
            self.on_message, worker.port_name, message
        )
        worker.on_error = lambda error: _emit(self.on_error, worker.port_name, error)
        self.workers.append(worker)
        worker.open()
        return worker

    def disconnect_from_port(self, port_name: str) -> bool:
        """Close the first worker on ``port_name``; return whether there was one."""
        for worker in self.workers:
            if worker.port_name == port_name:
                worker.close()
                return True
        return False

    def poll(self) -> None:
        """Let every worker read its port."""
        for worker in list(self.workers):
            worker.poll()

    def close(self) -> None:
        """Close every port without reporting, and forget the workers."""
        for worker in self.workers:
            worker._shutdown()
        self.workers.clear()

    def _activate(self, port_name: str) -> None:
        _emit(self.on_activated, port_name)

    def _deactivate(self, worker: PortWorker, port_name: str) -> None:
        if worker in self.workers:
            self.workers.remove(worker)
        _emit(self.on_deactivated, port_name)