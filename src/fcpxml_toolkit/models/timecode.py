"""Frame rates, frame conforming and SMPTE timecode conversion."""

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from math import floor, isfinite
from typing import Optional, Union

from .rational_time import RationalTime


class FrameRate(str, Enum):
    """Frame rates FCPXML sequences are authored in."""
    FPS_23_976 = "23.976"
    FPS_24 = "24"
    FPS_25 = "25"
    FPS_29_97 = "29.97"
    FPS_29_97_DROP = "29.97df"
    FPS_30 = "30"
    FPS_47_952 = "47.952"
    FPS_48 = "48"
    FPS_50 = "50"
    FPS_59_94 = "59.94"
    FPS_59_94_DROP = "59.94df"
    FPS_60 = "60"

    @property
    def frame_duration(self) -> RationalTime:
        """Exact duration of one frame, as FCPXML writes it."""
        value, timescale = _FRAME_DURATIONS[self]
        return RationalTime(value, timescale)

    @property
    def timecode_base(self) -> int:
        """Nominal frames per timecode second (30 for 29.97)."""
        return _TIMECODE_BASES[self]

    @property
    def drop_frame(self) -> bool:
        return self in (FrameRate.FPS_29_97_DROP, FrameRate.FPS_59_94_DROP)

    @property
    def fps(self) -> Fraction:
        """Exact frames per second."""
        return 1 / self.frame_duration.fraction

    @classmethod
    def from_frame_duration(cls, frame_duration: RationalTime, drop: bool = False) -> Optional["FrameRate"]:
        """Find the rate whose frame duration equals ``frame_duration``.

        Args:
            frame_duration: e.g. the ``frameDuration`` of a ``format`` resource
            drop: Prefer the drop-frame variant where one exists

        Returns:
            Matching FrameRate, or None for non-standard durations
        """
        for rate in cls:
            if rate.frame_duration == frame_duration and rate.drop_frame == drop:
                return rate
        if drop:
            return cls.from_frame_duration(frame_duration, drop=False)
        return None


_FRAME_DURATIONS = {
    FrameRate.FPS_23_976: (1001, 24000),
    FrameRate.FPS_24: (100, 2400),
    FrameRate.FPS_25: (100, 2500),
    FrameRate.FPS_29_97: (1001, 30000),
    FrameRate.FPS_29_97_DROP: (1001, 30000),
    FrameRate.FPS_30: (100, 3000),
    FrameRate.FPS_47_952: (1001, 48000),
    FrameRate.FPS_48: (100, 4800),
    FrameRate.FPS_50: (100, 5000),
    FrameRate.FPS_59_94: (1001, 60000),
    FrameRate.FPS_59_94_DROP: (1001, 60000),
    FrameRate.FPS_60: (100, 6000),
}

_TIMECODE_BASES = {
    FrameRate.FPS_23_976: 24,
    FrameRate.FPS_24: 24,
    FrameRate.FPS_25: 25,
    FrameRate.FPS_29_97: 30,
    FrameRate.FPS_29_97_DROP: 30,
    FrameRate.FPS_30: 30,
    FrameRate.FPS_47_952: 48,
    FrameRate.FPS_48: 48,
    FrameRate.FPS_50: 50,
    FrameRate.FPS_59_94: 60,
    FrameRate.FPS_59_94_DROP: 60,
    FrameRate.FPS_60: 60,
}


@dataclass(frozen=True)
class Timecode:
    """SMPTE timecode at a given frame rate."""
    hours: int
    minutes: int
    seconds: int
    frames: int
    frame_rate: FrameRate

    def __post_init__(self):
        if not 0 <= self.minutes < 60 or not 0 <= self.seconds < 60:
            raise ValueError(f"Invalid timecode fields: {self.minutes}m {self.seconds}s")
        if not 0 <= self.frames < self.frame_rate.timecode_base:
            raise ValueError(
                f"Frame {self.frames} out of range for {self.frame_rate.value} fps"
            )
        if self.hours < 0:
            raise ValueError(f"Negative hours: {self.hours}")

    @property
    def frame_number(self) -> int:
        """Zero-based count of real frames this timecode labels."""
        base = self.frame_rate.timecode_base
        nominal = ((self.hours * 60 + self.minutes) * 60 + self.seconds) * base + self.frames
        if not self.frame_rate.drop_frame:
            return nominal
        dropped = _dropped_per_minute(base)
        total_minutes = self.hours * 60 + self.minutes
        return nominal - dropped * (total_minutes - total_minutes // 10)

    def __str__(self) -> str:
        separator = ";" if self.frame_rate.drop_frame else ":"
        return (
            f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"
            f"{separator}{self.frames:02d}"
        )


def _dropped_per_minute(base: int) -> int:
    # 2 frame labels per minute at 30, 4 at 60
    return 2 * (base // 30)


def _as_fraction(time: Union[RationalTime, float]) -> Optional[Fraction]:
    if isinstance(time, RationalTime):
        return time.fraction
    if not isfinite(time):
        return None
    return Fraction(time)


def conform(time: RationalTime, frame_duration: RationalTime) -> RationalTime:
    """Floor ``time`` to a whole number of frames.

    Edit points are conformed with this so they land on frame boundaries
    without ever moving later than requested.

    Args:
        time: Time to quantize
        frame_duration: Duration of one frame, must be positive

    Returns:
        The largest multiple of ``frame_duration`` not after ``time``,
        expressed on the frame duration's timescale
    """
    if not frame_duration.is_positive:
        raise ValueError(f"frame_duration must be positive, got {frame_duration}")
    frames = (time.value * frame_duration.timescale) // (time.timescale * frame_duration.value)
    return RationalTime(frames * frame_duration.value, frame_duration.timescale)


def _nearest_frames(seconds: Fraction, frame_rate: FrameRate) -> int:
    # Half-frame ties round later
    return floor(seconds * frame_rate.fps + Fraction(1, 2))


def frame_aligned(seconds: float, frame_rate: FrameRate) -> Optional[RationalTime]:
    """Round float seconds to the nearest frame boundary, for display."""
    exact = _as_fraction(seconds)
    if exact is None:
        return None
    return frame_rate.frame_duration * _nearest_frames(exact, frame_rate)


def aligned(time: RationalTime, frame_rate: FrameRate) -> RationalTime:
    """Round ``time`` to the nearest frame boundary."""
    return frame_rate.frame_duration * _nearest_frames(time.fraction, frame_rate)


def timecode_from_time(time: Union[RationalTime, float], frame_rate: FrameRate) -> Optional[Timecode]:
    """Convert a time to timecode, flooring to the containing frame.

    Args:
        time: RationalTime or float seconds
        frame_rate: Rate to label frames in

    Returns:
        Timecode, or None for non-finite or negative input
    """
    exact = _as_fraction(time)
    if exact is None or exact < 0:
        return None

    frame_number = floor(exact / frame_rate.frame_duration.fraction)
    base = frame_rate.timecode_base

    if frame_rate.drop_frame:
        dropped = _dropped_per_minute(base)
        frames_per_minute = base * 60 - dropped
        frames_per_ten_minutes = base * 600 - dropped * 9
        tens, remainder = divmod(frame_number, frames_per_ten_minutes)
        frame_number += dropped * 9 * tens
        if remainder > dropped:
            frame_number += dropped * ((remainder - dropped) // frames_per_minute)

    frames = frame_number % base
    total_seconds = frame_number // base
    return Timecode(
        hours=total_seconds // 3600,
        minutes=(total_seconds // 60) % 60,
        seconds=total_seconds % 60,
        frames=frames,
        frame_rate=frame_rate,
    )


def time_from_timecode(timecode: Timecode) -> RationalTime:
    """Exact start time of the frame a timecode labels."""
    return timecode.frame_rate.frame_duration * timecode.frame_number


def time_from_components(
    hours: int,
    minutes: int,
    seconds: int,
    frames: int,
    frame_duration: RationalTime,
) -> RationalTime:
    """Non-drop timecode fields to exact time."""
    whole = RationalTime(hours * 3600 + minutes * 60 + seconds, 1)
    return whole + frame_duration * frames


def counter_string(time: RationalTime) -> str:
    """Format as ``HH:MM:SS,mmm`` (milliseconds rounded)."""
    sign = "-" if time.is_negative else ""
    total_ms = floor(abs(time.fraction) * 1000 + Fraction(1, 2))
    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    seconds, millis = divmod(remainder, 1000)
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"
