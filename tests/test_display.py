import pytest

from sensormon.device import Device, DeviceController, SensorCollection
from sensormon.display import DeviceView, DisplayGroup
from sensormon.indicators import FlagIndicator, LcdIndicator

PARAMETER_LINES = [
    "#GROUPS_SEPARATOR:  [;]\\s*",
    "NAME:  MCP9803;",
    "VALUE: {LCD} [Temperature  °C   -50  75  80 125]",
    "VALUE: {FLG} [ALARM-LEVEL  bool NORMAL ALERT]",
]


@pytest.fixture
def controller():
    collection = SensorCollection()
    collection.load_lines(PARAMETER_LINES)
    return DeviceController(collection)


@pytest.fixture
def received():
    return []


@pytest.fixture
def group(controller, received):
    return DisplayGroup(controller, on_command=received.append)


def test_first_message_creates_view(group):
    view = group.treat_message("COM3", "MCP9803:000; 70.2 ALERT")
    assert group.devices == {"COM3": view}
    assert view.title == "MCP9803:000"
    assert [ind.kind for ind in view.indicators] == ["LCD", "FLG"]
    assert view.device.values == ["70.2", "ALERT"]


def test_values_reach_indicators(group):
    view = group.treat_message("COM3", "MCP9803:000; 70.2 ALERT")
    lcd, flag = view.indicators
    assert lcd.display_value == 70.2
    assert flag.button_text == "ALERT"


def test_following_message_updates_same_view(group):
    first = group.treat_message("COM3", "MCP9803:000; 70.2 ALERT")
    second = group.treat_message("COM3", "MCP9803:000; 20 NORMAL")
    assert first is second
    assert second.device.values == ["20", "NORMAL"]
    assert second.indicators[1].button_text == "NORMAL"


def test_message_for_other_device_clears_values(group):
    view = group.treat_message("COM3", "MCP9803:000; 70.2 ALERT")
    group.treat_message("COM3", "MCP9803:001; 20 NORMAL")
    assert view.device.values == []


def test_unknown_sensor_is_ignored(group):
    assert group.treat_message("COM3", "OTHER:000; 1 2") is None
    assert group.devices == {}


def test_comment_message_is_ignored(group):
    assert group.treat_message("COM3", "# MCP9803:000; 1 2") is None
    assert group.devices == {}


def test_indicator_command_is_forwarded(group, received):
    view = group.treat_message("COM3", "MCP9803:000; 200 ALERT")
    assert view.indicators[0].display_text == "ERROR"
    assert view.device.values == ["200", "ALERT"]
    assert received == ["NAME: MCP9803:000; VALUE: {LCD} [Temperature error]"]


def test_remove_device(group):
    view = group.treat_message("COM3", "MCP9803:000; 70.2 ALERT")
    assert group.remove_device("COM3") is view
    assert group.devices == {}
    assert group.remove_device("COM3") is None


def test_device_view_skips_unknown_indicators():
    device = Device(name="S:1")
    view = DeviceView(device)
    view.set_parameters(["NAME: S", "VALUE: {XYZ} [a b 1 2]", "VALUE: {LCD} [a b 1 2]"])
    assert len(view.indicators) == 1
    assert isinstance(view.indicators[0], LcdIndicator)
    assert view.title == "S:1"


def test_device_view_passes_values_in_order():
    device = Device(name="S:1")
    view = DeviceView(device)
    view.set_parameters(["VALUE: {FLG} [F off on]", "VALUE: {FLG} [G off on]"])
    device.set_values(["on", "off", "extra"])
    first, second = view.indicators
    assert isinstance(first, FlagIndicator)
    assert first.button_text == "on"
    assert second.button_text == "off"


def test_device_view_command_prefix():
    commands = []
    device = Device(name="S:1")
    view = DeviceView(device, on_command=commands.append)
    view.set_parameters(["VALUE: {FLG} [F off on]"])
    view.indicators[0].set_value("off")
    view.indicators[0].press()
    assert commands == ["NAME: S:1; VALUE: {FLG} [F off]"]