"""
Tone synthesis for the shutter click.
"""

import wave
from pathlib import Path

import numpy as np

SAMPLE_RATE = 44100


def synthesize_click(
    frequency: float = 1000.0,
    duration: float = 0.05,
    sample_rate: int = SAMPLE_RATE,
    floor: float = 0.0001,
) -> np.ndarray:
    """
    Sine tone with an exponential decay from full gain down to floor.

    Args:
        frequency: Tone frequency (Hz)
        duration: Length (seconds)
        sample_rate: Samples per second
        floor: Gain reached at the end of the tone

    Returns:
        Mono int16 samples
    """
    n = max(1, int(round(duration * sample_rate)))
    t = np.arange(n, dtype=np.float64) / sample_rate
    gain = np.power(floor, t / duration)
    wave_data = np.sin(2.0 * np.pi * frequency * t) * gain

    return np.round(wave_data * 32767).astype(np.int16)


def write_wav(path: Path, samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> Path:
    """Write mono int16 samples to a WAV file."""
    path = Path(path)
    with wave.open(str(path), "wb") as f:
        f.setnchannels(1)
        f.setsampwidth(2)
        f.setframerate(sample_rate)
        f.writeframes(samples.astype("<i2").tobytes())
    return path
