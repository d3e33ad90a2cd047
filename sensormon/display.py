"""Views of the devices found in port messages."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .device import Device, DeviceController
from .indicators import Indicator, make_indicator
from .parsing import DeviceParser

logger = logging.getLogger(__name__)

CommandHandler = Callable[[str], None]


class DeviceView:
    """A device together with one indicator for each of its parameters."""

    def __init__(self, device: Device, on_command: CommandHandler | None = None) -> None:
        self.device = device
        self.indicators: list[Indicator] = []
        self.title = ""
        self._on_command = on_command
        device.subscribe(self.set_measurements)

    def set_parameters(self, params: Sequence[str]) -> None:
        """Create indicators from the ``VALUE:`` lines of a sensor's parameters."""
        parser = DeviceParser()
        for line in params:
            if not parser.starts_with_value(line):
                continue
            words = parser.parse_value_line(line)
            if not words:
                continue
            kind, *indicator_params = words
            indicator = make_indicator(kind)
            if indicator is None:
                continue
            indicator.set_params(indicator_params)
            indicator.subscribe(self._forward_command)
            self.indicators.append(indicator)
        self.title = self.device.name

    def set_measurements(self, values: Sequence[str]) -> None:
        """Hand the values, in order, to the indicators."""
        for indicator, value in zip(self.indicators, values):
            indicator.set_value(value)

    def _forward_command(self, command: str) -> None:
        if self._on_command is not None:
            self._on_command(f"NAME: {self.device.name}; VALUE: {command}")


class DisplayGroup:
    """Keeps one device view for each port that sends known sensor messages."""

    def __init__(
        self,
        controller: DeviceController | None = None,
        on_command: CommandHandler | None = None,
    ) -> None:
        self.controller = controller if controller is not None else DeviceController()
        self.devices: dict[str, DeviceView] = {}
        self._on_command = on_command

    def treat_message(self, port_name: str, message: str) -> DeviceView | None:
        """Update, or create, the view of the device on ``port_name``.

        Returns None when no view exists and the message names no known sensor.
        """
        view = self.devices.get(port_name)
        if view is None:
            device = Device()
            params = self.controller.parse_params(device, message)
            if not device.name or not params:
                return None
            logger.debug("DeviceForm created, port[%s]", port_name)
            view = DeviceView(device, on_command=self.treat_command)
            view.set_parameters(params)
            self.devices[port_name] = view
            logger.debug("m_devices.size()=[%d]", len(self.devices))

        view.device.set_values(self.controller.parse_values(view.device, message))
        return view

    def remove_device(self, port_name: str) -> DeviceView | None:
        """Forget the view of ``port_name`` and return it, if there was one."""
        view = self.devices.pop(port_name, None)
        if view is not None:
            logger.debug("DeviceForm deleted, port[%s]", port_name)
        return view

    def treat_command(self, command: str) -> None:
        """Log a command sent by an indicator and pass it on."""
        logger.debug("#COMMAND\t%s", command)
        if self._on_command is not None:
            self._on_command(command)