"""Indicators that show the values of one device parameter."""

from __future__ import annotations

import colorsys
import math
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

CommandListener = Callable[[str], None]

MAX_POINTS = 30
"""Number of points the graph indicator shows before it scrolls."""

_UINT_RE = re.compile(r"\s*\+?[0-9]+\s*")
_UINT_MAX = 0xFFFFFFFF


def _to_double(text: str) -> tuple[float, bool]:
    """Parse a number; on failure return 0.0 and False."""
    try:
        return float(text), True
    except ValueError:
        return 0.0, False


def _to_uint(text: str) -> int | None:
    if not _UINT_RE.fullmatch(text):
        return None
    number = int(text)
    return number if number <= _UINT_MAX else None


def _format_number(value: float) -> str:
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def _hsv_name(hue: int, saturation: int, value: int) -> str:
    red, green, blue = colorsys.hsv_to_rgb(hue / 360, saturation / 255, value / 255)
    return "#{:02x}{:02x}{:02x}".format(
        round(red * 255), round(green * 255), round(blue * 255)
    )


class Indicator(ABC):
    """Shows one parameter of a device and may send commands back."""

    kind = ""

    def __init__(self) -> None:
        self._listeners: list[CommandListener] = []

    def subscribe(self, callback: CommandListener) -> None:
        """Call ``callback`` with every command the indicator sends."""
        self._listeners.append(callback)

    def _send_command(self, command: str) -> None:
        for listener in list(self._listeners):
            listener(command)

    @abstractmethod
    def set_params(self, params: Sequence[str]) -> None:
        """Configure the indicator from ``measure unit ...`` words."""

    @abstractmethod
    def set_value(self, value: str) -> None:
        """Show a newly measured value."""


class LcdIndicator(Indicator):
    """A numeric display with a bar between a minimum and a maximum."""

    kind = "LCD"

    def __init__(self) -> None:
        super().__init__()
        self.limits: list[float] = [0.0, 1.0]
        self.measure = ""
        self.unit = ""
        self.display_value = 0.0
        self.display_text = "0"
        self.progress = 0.0

    @property
    def minimum(self) -> float:
        return self.limits[0]

    @property
    def maximum(self) -> float:
        return self.limits[-1]

    @property
    def min_text(self) -> str:
        return f"MIN={_format_number(self.minimum)}"

    @property
    def max_text(self) -> str:
        return f"MAX={_format_number(self.maximum)}"

    def set_params(self, params: Sequence[str]) -> None:
        if len(params) < 2:
            raise ValueError("LCD indicator needs a measure and a unit")
        self.measure, self.unit = params[0], params[1]
        limits = [_to_double(word)[0] for word in params[2:]]
        if limits:
            self.limits = limits

    def set_value(self, value: str) -> None:
        data, ok = _to_double(value)
        if ok and data == self.display_value:
            return

        low, high = self.minimum, self.maximum
        if ok and low <= data <= high:
            self.display_value = data
            self.display_text = _format_number(data)
            self.progress = data
        else:
            self.display_value = 0.0
            self.display_text = "ERROR"
            self.progress = low if data < low else high
            self._send_command(f"{{LCD}} [{self.measure} error]")


class FlagIndicator(Indicator):
    """A button showing one of several named states."""

    kind = "FLG"

    def __init__(self) -> None:
        super().__init__()
        self.name = ""
        self.states: list[str] = ["0", "1"]
        self.current_state = -1
        self.button_text = ""
        self.flat = False
        self.enabled = True
        self.states_label = ""
        self.style_sheet = ""

    def set_params(self, params: Sequence[str]) -> None:
        if not params:
            raise ValueError("flag indicator needs a name")
        self.states = list(params)
        self.name = self.states.pop(0)
        self.states_label = ""

    def press(self) -> None:
        """Send the state shown on the button as a command."""
        self._send_command(f"{{FLG}} [{self.name} {self.button_text}]")

    def set_value(self, value: str) -> None:
        position = _to_uint(value)
        if position is not None and position < len(self.states):
            ok = True
            if self.current_state == position:
                return
            self.button_text = self.states[position]
        elif value in self.states:
            ok = True
            position = self.states.index(value)
            if self.current_state == position:
                return
            self.button_text = value
        else:
            ok = False
            position = -1
            self.button_text = "error"
            self._send_command(f"{{FLG}} [{self.name} error]")
            if self.current_state == position:
                return

        self.current_state = position
        self.flat = not ok
        self.enabled = ok
        self.states_label = "" if position < 0 else f"flag_index={position}"

        saturation = 0
        if position and self.states:
            saturation = 255 * (position + 1) // len(self.states)
        self.style_sheet = f"background-color: {_hsv_name(0, saturation, 240)}"


class GraphIndicator(Indicator):
    """A scrolling plot of values together with constant limit lines."""

    kind = "DGP"

    def __init__(self) -> None:
        super().__init__()
        self.measure = ""
        self.unit = ""
        self.minimum = 0.0
        self.maximum = 0.0
        self.limits: list[float] = []
        self.series: list[list[tuple[int, float]]] = []
        self.x_range: tuple[int, int] = (0, MAX_POINTS)
        self.y_range: tuple[float, float] = (0.0, 0.0)
        self.x_label = "count"
        self.y_label = ""

    def set_params(self, params: Sequence[str]) -> None:
        if len(params) < 3:
            raise ValueError("graph indicator needs a measure, a unit and a minimum")
        self.measure, self.unit = params[0], params[1]
        self.minimum = _to_double(params[2])[0]
        self.maximum = _to_double(params[-1])[0]
        self.limits = [_to_double(word)[0] for word in params[3:-1]]
        self.series = [[] for _ in range(1 + len(self.limits))]
        self.y_label = f"{self.measure},{self.unit}"
        self.x_range = (0, MAX_POINTS)
        self.y_range = (self.minimum, self.maximum)

    def set_value(self, value: str) -> None:
        if not self.series:
            raise RuntimeError("set_params must be called before set_value")
        data, ok = _to_double(value)
        if not ok or data < self.minimum or data > self.maximum:
            data = math.nan

        count = len(self.series[0])
        if count > MAX_POINTS:
            self.x_range = (self.x_range[0] + 1, self.x_range[1] + 1)

        self.series[0].append((count, data))
        for limit, line in zip(self.limits, self.series[1:]):
            line.append((count, limit))


_INDICATORS: dict[str, type[Indicator]] = {
    LcdIndicator.kind: LcdIndicator,
    FlagIndicator.kind: FlagIndicator,
    GraphIndicator.kind: GraphIndicator,
}


def make_indicator(name: str) -> Indicator | None:
    """Create the indicator of type ``name``, or None if the type is unknown."""
    factory = _INDICATORS.get(name)
    return factory() if factory is not None else None