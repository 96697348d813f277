#!/usr/bin/env python3
"""Run the wave detector on a webcam or a recorded video.

Shows every intermediate buffer of the pipeline in one preview window
when --show_viz is given.

Usage:
    python scripts/run_wave_detector.py [--camera_id 0] [--show_viz]
    python scripts/run_wave_detector.py --video wave.mp4 --loop --show_viz
"""

import asyncio
import argparse
import logging

import cv2

from wavewatch.core import MonitorType, WaveState
from wavewatch.monitors import MonitorEventBus, MonitorEvent, WaveMonitor
from wavewatch.sources import open_source
from wavewatch.utils.config import load_config
from wavewatch.vision import compose_debug_mosaic


logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Detect waving in front of a camera')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML config file (default: config/default.yaml)')
    parser.add_argument('--camera_id', type=int, default=None,
                        help='Camera device ID')
    parser.add_argument('--video', type=str, default=None,
                        help='Read frames from a video file instead of the camera')
    parser.add_argument('--loop', action='store_true',
                        help='Restart the video on EOF')
    parser.add_argument('--fps', type=float, default=None,
                        help='Tick rate in Hz (default: 20)')
    parser.add_argument('--contrast_factor', type=float, default=None)
    parser.add_argument('--max_interval', type=int, default=None,
                        help='Ticks allowed between two transitions')
    parser.add_argument('--transition_count', type=int, default=None,
                        help='Transitions needed before a pixel counts as waving')
    parser.add_argument('--outlier_threshold', type=float, default=None,
                        help='Fraction of the 3x3 neighbourhood that must agree')
    parser.add_argument('--show_viz', action='store_true',
                        help='Show the debug mosaic window')
    parser.add_argument('--max_ticks', type=int, default=None,
                        help='Stop after this many ticks')
    return parser.parse_args()


def build_overrides(args: argparse.Namespace) -> dict:
    """Map command line flags onto dotted config keys."""
    mapping = {
        'camera.device': args.camera_id,
        'camera.video_path': args.video,
        'camera.fps': args.fps,
        'monitor.update_rate_hz': args.fps,
        'monitor.parameters.contrast_factor': args.contrast_factor,
        'monitor.parameters.max_interval': args.max_interval,
        'monitor.parameters.transition_count_threshold': args.transition_count,
        'monitor.parameters.outlier_threshold': args.outlier_threshold,
    }
    overrides = {key: value for key, value in mapping.items() if value is not None}
    if args.loop:
        overrides['camera.loop'] = True
    if args.show_viz:
        overrides['display.show_viz'] = True
        overrides['monitor.render_debug'] = True
    return overrides


async def main():
    args = parse_args()
    config = load_config(args.config, overrides=build_overrides(args))

    bus = MonitorEventBus()
    monitor = WaveMonitor(config.monitor)
    monitor.set_event_bus(bus)

    last_state = {'state': WaveState.PRIMING}

    def on_wave(event: MonitorEvent):
        state = event.output.state
        if state != last_state['state'] and state != WaveState.PRIMING:
            print(f"Waving: {'YES!' if state == WaveState.WAVING else 'Nope'}")
        last_state['state'] = state

    bus.subscribe(MonitorType.WAVE, on_wave)

    source = open_source(config.camera)
    try:
        source.open()
    except (RuntimeError, FileNotFoundError) as e:
        logger.error(f"Could not open frame source: {e}")
        return

    interval = 1.0 / config.monitor.update_rate_hz
    display = config.display
    ticks = 0
    logger.info("Press 'q' to quit, 'r' to reset the detector")

    try:
        while args.max_ticks is None or ticks < args.max_ticks:
            frame = source.read()
            if frame is None:
                if not source.is_live:
                    logger.info("End of video")
                    break
                logger.warning("Failed to capture frame")
                await asyncio.sleep(interval)
                continue

            output = await monitor.update(frame=frame.to_rgba())
            ticks += 1

            if display.show_viz and output is not None and output.debug_frames:
                mosaic = compose_debug_mosaic(
                    output.debug_frames,
                    scale=display.scale,
                    columns=display.columns,
                    is_waving=output.is_waving,
                )
                cv2.imshow(display.window_name, mosaic)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    logger.info("Quit requested")
                    break
                elif key == ord('r'):
                    monitor.reset()

            await asyncio.sleep(interval)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        source.close()
        if display.show_viz:
            cv2.destroyAllWindows()

        logger.info("=" * 60)
        logger.info("Final Statistics")
        logger.info("=" * 60)
        for key, value in monitor.get_wave_statistics().items():
            logger.info(f"  {key}: {value}")


if __name__ == '__main__':
    asyncio.run(main())
