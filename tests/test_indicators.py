import math

import pytest

from sensormon.indicators import (
    MAX_POINTS,
    FlagIndicator,
    GraphIndicator,
    LcdIndicator,
    make_indicator,
)

LCD_PARAMS = ["Temperature", "°C", "-50", "75", "80", "125"]
FLG_PARAMS = ["ALARM-LEVEL", "bool", "NORMAL", "ALERT"]


@pytest.mark.parametrize("kind", ["LCD", "FLG", "DGP"])
def test_make_indicator_known_kinds(kind):
    assert make_indicator(kind).kind == kind


def test_make_indicator_unknown_kind():
    assert make_indicator("XYZ") is None


def _lcd():
    indicator = LcdIndicator()
    indicator.set_params(LCD_PARAMS)
    commands = []
    indicator.subscribe(commands.append)
    return indicator, commands


def test_lcd_params():
    indicator, _ = _lcd()
    assert indicator.measure == "Temperature"
    assert indicator.unit == "°C"
    assert indicator.limits == [-50.0, 75.0, 80.0, 125.0]
    assert indicator.min_text == "MIN=-50"
    assert indicator.max_text == "MAX=125"


def test_lcd_keeps_default_limits_without_numbers():
    indicator = LcdIndicator()
    indicator.set_params(["Voltage", "V"])
    assert indicator.limits == [0.0, 1.0]


def test_lcd_needs_measure_and_unit():
    with pytest.raises(ValueError):
        LcdIndicator().set_params(["Temperature"])


def test_lcd_value_in_range():
    indicator, commands = _lcd()
    indicator.set_value("70.2")
    assert indicator.display_value == 70.2
    assert indicator.progress == 70.2
    assert commands == []


def test_lcd_value_above_range():
    indicator, commands = _lcd()
    indicator.set_value("200")
    assert indicator.display_text == "ERROR"
    assert indicator.progress == indicator.maximum
    assert commands == ["{LCD} [Temperature error]"]


def test_lcd_value_below_range():
    indicator, commands = _lcd()
    indicator.set_value("-100")
    assert indicator.progress == indicator.minimum
    assert len(commands) == 1


def test_lcd_non_numeric_value_is_error():
    indicator, commands = _lcd()
    indicator.set_value("abc")
    assert indicator.display_text == "ERROR"
    assert commands == ["{LCD} [Temperature error]"]


def test_lcd_repeated_value_is_ignored():
    indicator, commands = _lcd()
    indicator.set_value("70.2")
    indicator.progress = -1.0
    indicator.set_value("70.2")
    assert indicator.progress == -1.0


def _flag():
    indicator = FlagIndicator()
    indicator.set_params(FLG_PARAMS)
    commands = []
    indicator.subscribe(commands.append)
    return indicator, commands


def test_flag_params():
    indicator, _ = _flag()
    assert indicator.name == "ALARM-LEVEL"
    assert indicator.states == ["bool", "NORMAL", "ALERT"]


def test_flag_value_by_index():
    indicator, commands = _flag()
    indicator.set_value("1")
    assert indicator.button_text == "NORMAL"
    assert indicator.current_state == 1
    assert indicator.states_label == "flag_index=1"
    assert indicator.enabled and not indicator.flat
    assert commands == []


def test_flag_value_by_name():
    indicator, _ = _flag()
    indicator.set_value("ALERT")
    assert indicator.button_text == "ALERT"
    assert indicator.current_state == 2


def test_flag_first_state_has_grey_background():
    indicator, _ = _flag()
    indicator.set_value("0")
    assert indicator.style_sheet == "background-color: #f0f0f0"


def test_flag_unknown_value_is_error_each_time():
    indicator, commands = _flag()
    indicator.set_value("1")
    indicator.set_value("bogus")
    assert indicator.button_text == "error"
    assert indicator.current_state == -1
    assert indicator.flat and not indicator.enabled
    assert indicator.states_label == ""
    indicator.set_value("bogus")
    assert commands == ["{FLG} [ALARM-LEVEL error]"] * 2


def test_flag_press_sends_button_text():
    indicator, commands = _flag()
    indicator.set_value("NORMAL")
    indicator.press()
    assert commands == ["{FLG} [ALARM-LEVEL NORMAL]"]


def test_flag_needs_name():
    with pytest.raises(ValueError):
        FlagIndicator().set_params([])


def _graph():
    indicator = GraphIndicator()
    indicator.set_params(LCD_PARAMS)
    return indicator


def test_graph_params():
    indicator = _graph()
    assert indicator.limits == [75.0, 80.0]
    assert indicator.y_range == (-50.0, 125.0)
    assert indicator.y_label == "Temperature,°C"
    assert len(indicator.series) == 1 + len(indicator.limits)


def test_graph_adds_points_with_limits():
    indicator = _graph()
    indicator.set_value("20")
    assert indicator.series[0] == [(0, 20.0)]
    assert indicator.series[1] == [(0, 75.0)]
    assert indicator.series[2] == [(0, 80.0)]


def test_graph_out_of_range_is_nan():
    indicator = _graph()
    indicator.set_value("500")
    indicator.set_value("oops")
    points = indicator.series[0]
    assert [x for x, _ in points] == [0, 1]
    assert math.isnan(points[0][1])
    assert math.isnan(points[1][1])
    assert indicator.series[1] == [(0, 75.0), (1, 75.0)]


def test_graph_scrolls_after_max_points():
    indicator = _graph()
    for _ in range(MAX_POINTS + 1):
        indicator.set_value("10")
    assert indicator.x_range == (0, MAX_POINTS)
    indicator.set_value("10")
    assert indicator.x_range == (1, MAX_POINTS + 1)


def test_graph_value_before_params_raises():
    with pytest.raises(RuntimeError):
        GraphIndicator().set_value("1")


def test_graph_needs_three_params():
    with pytest.raises(ValueError):
        GraphIndicator().set_params(["Temperature", "°C"])