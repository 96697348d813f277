#!/usr/bin/env python3
"""Simple example: print a line whenever someone waves at the webcam.

Uses the monitor's continuous mode (the same loop any other tick driver
would use) and an event bus subscriber instead of polling outputs.

Usage:
    python examples/simple_wave_alert.py
"""

import asyncio

from wavewatch.core import MonitorType, WaveState
from wavewatch.monitors import MonitorEventBus, MonitorEvent, WaveMonitor
from wavewatch.sources import WebcamSource
from wavewatch.utils.config import WaveMonitorConfig


async def main():
    """Wave alert demo."""
    print("=" * 60)
    print("wavewatch wave alert example")
    print("=" * 60)
    print("Wave a hand in front of the camera. Ctrl+C to quit.")
    print()

    monitor = WaveMonitor(WaveMonitorConfig(update_rate_hz=20.0))
    bus = MonitorEventBus()
    monitor.set_event_bus(bus)

    def on_wave(event: MonitorEvent):
        output = event.output
        if output.state == WaveState.WAVING and output.wave_pixels:
            print(f"👋 Waving! ({output.wave_pixels} pixels, tick {output.tick})")

    bus.subscribe(MonitorType.WAVE, on_wave)

    try:
        with WebcamSource(0, fps=20.0, output_size=(40, 30)) as source:
            await monitor.start_continuous(source.as_input_provider())
    except RuntimeError as e:
        print(f"❌ Error: {e}")
    except KeyboardInterrupt:
        pass
    finally:
        monitor.stop()
        print()
        for key, value in monitor.get_wave_statistics().items():
            print(f"  {key}: {value}")


if __name__ == "__main__":
    asyncio.run(main())
