"""Devices, the sensor parameter collection and message interpretation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from os import PathLike

from .parsing import DeviceParser, Separator

logger = logging.getLogger(__name__)

ValuesListener = Callable[[list[str]], None]


@dataclass
class Device:
    """A device identified as ``sensorName:address`` with its latest values."""

    name: str = ""
    values: list[str] = field(default_factory=list)
    _listeners: list[ValuesListener] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    def sensor_name(self) -> str:
        """Return the sensor part of the device name."""
        parts = DeviceParser().parse(self.name, Separator.NAMES)
        if not parts:
            raise ValueError(f"device name {self.name!r} has no sensor part")
        return parts[0]

    def set_values(self, values: Iterable[str]) -> None:
        """Store new values and notify every subscriber."""
        self.values = list(values)
        for listener in list(self._listeners):
            listener(list(self.values))

    def subscribe(self, callback: ValuesListener) -> None:
        """Call ``callback`` with the values each time they are set."""
        self._listeners.append(callback)


class SensorCollection:
    """Parameter lines of each known sensor, read from a parameter file."""

    def __init__(self) -> None:
        self._parameters: dict[str, list[str]] = {}

    def load_lines(self, lines: Iterable[str]) -> None:
        """Read parameter lines, adding them to the collection."""
        parser = DeviceParser()
        sensor_name: str | None = None
        for raw_line in lines:
            line = raw_line.rstrip("\r\n")
            if parser.is_comment(line):
                parser.set_config(line)
                continue
            if not parser.is_data_line(line):
                continue

            logger.debug("\t%s", line)
            if parser.starts_with_name(line):
                sensor_name = parser.parse_name_line(line)
            if sensor_name:
                self._parameters.setdefault(sensor_name, []).extend(
                    parser.parse(line, Separator.GROUP)
                )

    def load_file(self, path: str | PathLike[str]) -> None:
        """Read a UTF-8 parameter file into the collection."""
        logger.debug("%s:", path)
        with open(path, encoding="utf-8") as stream:
            self.load_lines(stream)

    def parameters(self, sensor_name: str) -> list[str]:
        """Return the parameter lines of a sensor, empty if it is unknown."""
        return list(self._parameters.get(sensor_name, []))

    def sensor_names(self) -> list[str]:
        return list(self._parameters)


class DeviceController:
    """Interprets ``sensor:address; value value ...`` messages."""

    def __init__(self, collection: SensorCollection | None = None) -> None:
        self.sensor_collection = collection if collection is not None else SensorCollection()

    def parse_params(self, device: Device, message: str) -> list[str]:
        """Name ``device`` after the message and return its sensor parameters.

        An empty list means the message is not a device line or the sensor
        is not in the collection.
        """
        parser = DeviceParser()
        if not parser.is_data_line(message):
            return []
        groups = parser.parse(message, Separator.GROUP)
        if len(groups) < 2:
            return []

        device_name = groups[0]
        device.name = device_name
        name_parts = parser.parse(device_name, Separator.NAMES)
        if not name_parts:
            return []
        return self.sensor_collection.parameters(name_parts[0])

    def parse_values(self, device: Device, message: str) -> list[str]:
        """Return the values of a message addressed to ``device``."""
        parser = DeviceParser()
        if not parser.is_data_line(message):
            return []
        groups = parser.parse(message, Separator.GROUP)
        if len(groups) < 2:
            return []

        device_name, device_values = groups[0], groups[1]
        if device.name != device_name:
            return []
        return parser.parse(device_values, Separator.VALUE)