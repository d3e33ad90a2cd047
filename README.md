# sensormon

Watch serial ports for sensor devices and show what they report.

sensormon connects to serial ports at 57600 baud, 8N1, reads the lines that
arrive and looks up the sensor that sent them in a collection of sensor
descriptions. Each value of a known sensor is handed to an indicator:

- `LCD` (`LcdIndicator`): a numeric reading checked against its minimum and
  maximum
- `FLG` (`FlagIndicator`): a named flag with a fixed set of states
- `DGP` (`GraphIndicator`): a scrolling series of recent readings plus
  constant limit lines

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
sensormon [--config FILE] [--port NAME ...] [--no-scan] [--log-file FILE] [--duration SECONDS]
```

- `--config FILE`: read the sensor descriptions from this UTF-8 file. Without
  it the collection is empty, so no device is recognised and only the raw
  lines are printed.
- `--port NAME`: connect to this port at start; may be given several times.
- `--no-scan`: do not scan for ports. Without it the ports are listed about
  every ten seconds and each one not seen before is connected.
- `--log-file FILE`: send the log to this file, emptied on start, one record
  per line as `date | level | line | file | function | message`.
- `--duration SECONDS`: stop after this time. Otherwise the command runs
  until interrupted with Ctrl-C.

The command prints each received line as `[PORT]-> line`. For a known device
it then prints the device name and its latest values. Commands sent by
indicators are printed as `command: ...`, and a closed port as
`[PORT] closed`.

A port is closed when it reports an error or when nothing arrives on it for
25 seconds. A port that was connected once is not reconnected by scanning.

## Message format

A device sends lines in this form:

```
MCP9803:000; 70.2 ALERT
```

The device name is the part before the `;`. The sensor name is the part of the
device name before the `:`. The values that follow are separated by spaces and
go, in order, to the indicators of the device.

## Sensor descriptions

A description file looks like this:

```
#GROUPS_SEPARATOR:  [;]\s*
#VALUES_SEPARATOR:  [ ]\s*

NAME:  MCP9803;
VALUE: {LCD} [Temperature  °C   -50  75  80 125]
VALUE: {FLG} [ALARM-LEVEL  NORMAL ALERT]
```

- Lines that start with `#` are comments. A comment naming a separator
  (`GROUPS_SEPARATOR`, `GNAMES_SEPARATOR`, `INDICS_SEPARATOR`,
  `PARAMS_SEPARATOR`, `VALUES_SEPARATOR`) followed by `:` and a regular
  expression replaces that separator for the rest of the file.
- A `NAME:` line starts a new sensor.
- Each `VALUE:` line names an indicator type in braces and gives its
  parameters in brackets: a measure and a unit, then numbers. For `LCD` the
  first and last numbers are the minimum and maximum. For `DGP` the first
  is the minimum, the last the maximum and those between are limit lines.
  For `FLG` the first word is the flag name and the rest are its states.

## Library use

```python
from sensormon.device import SensorCollection, DeviceController
from sensormon.display import DisplayGroup
from sensormon.conversion import raw_to_float, float_to_raw, raw_to_string

collection = SensorCollection()
collection.load_lines([
    "NAME: MCP9803;",
    "VALUE: {LCD} [Temperature C -50 125]",
])
display = DisplayGroup(DeviceController(collection))
view = display.treat_message("COM3", "MCP9803:000; 70.2")
print(view.title, view.indicators[0].display_text)  # MCP9803:000 70.2

print(raw_to_float(0x1900))   # 25.0
print(raw_to_string(0x1900))  # ' 25.0'
```

- `sensormon.parsing.DeviceParser` splits description and message lines.
- `SensorCollection.load_lines` and `SensorCollection.load_file` build the
  collection. `SensorCollection.parameters` and
  `SensorCollection.sensor_names` read it.
- `DeviceController.parse_params` and `DeviceController.parse_values` split
  incoming messages.
- `DisplayGroup.treat_message` keeps one `DeviceView` per port and passes the
  values to its indicators. `DisplayGroup.remove_device` forgets a port.
- `sensormon.indicators.make_indicator` creates an indicator by type name.
  Indicators report errors as commands to the callbacks given to
  `subscribe`.
- `sensormon.comport.PortWorker` and `sensormon.comport.PortController` read
  serial ports through callbacks. `list_ports` and `port_description` query
  the system.
- `sensormon.monitor.PortMonitor` scans for ports and keeps track of the
  active and closed ones.
- `sensormon.logsetup.init` and `sensormon.logsetup.clean` redirect logging
  to nothing or to a file.

The helpers in `sensormon.conversion` convert MCP9803 temperature register
values, stored as two's complement in 1/16 °C steps, to and from floats and
text.

## What it does not do

- It has no graphical window. Indicators keep their state in attributes
  such as `display_text`, `button_text` and `series`, and the command prints
  text lines.
- It ships no sensor description file; pass one with `--config`.
- Commands produced by indicators are only printed, never sent to a device.