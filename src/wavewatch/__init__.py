"""wavewatch - wave gesture detection from a low resolution camera.

Counts how often each pixel of a small greyscale video flips between
darker and brighter, and reports a wave when a patch of pixels keeps
flipping.
"""

__version__ = "0.1.0"


def main() -> None:
    """Entry point for the wavewatch command."""
    print(f"wavewatch v{__version__}")
    print("Wave gesture detection from a low resolution camera")
    print()
    print("Available commands:")
    print("  python scripts/run_wave_detector.py --show_viz           - Detect waving on the webcam")
    print("  python scripts/run_wave_detector.py --video clip.mp4     - Detect waving in a video file")
    print()
    print("Tunables live in config/default.yaml.")
