"""Grab a still of the fridge shelf for ``scan --camera``, using OpenCV."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


def _cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install 'expirygraph[camera]'"
        ) from None
    return cv2


@contextmanager
def open_device(index: int) -> Iterator:
    """Yield an opened ``cv2.VideoCapture`` and always release it."""
    device = _cv2().VideoCapture(index)
    try:
        if not device.isOpened():
            raise RuntimeError(
                f"Could not open camera {index}. Check that it is connected."
            )
        yield device
    finally:
        device.release()


def list_cameras(max_check: int = 10) -> list[int]:
    """Indices below ``max_check`` that open successfully."""
    found: list[int] = []
    for index in range(max_check):
        try:
            with open_device(index):
                found.append(index)
        except RuntimeError:
            continue
    return found


@dataclass(frozen=True)
class ScanPhoto:
    camera_index: int
    image_path: str
    taken_at: datetime


class Camera:
    """Takes one photo per scan into ``save_dir``.

    The first ``warmup_frames`` reads are thrown away while the sensor
    settles its exposure.
    """

    def __init__(self, save_dir: str = "/tmp/expirygraph", warmup_frames: int = 3) -> None:
        self.save_dir = Path(save_dir).expanduser()
        self.warmup_frames = max(0, warmup_frames)

    def photo_path(self, index: int, taken_at: datetime) -> Path:
        return self.save_dir / f"scan_{taken_at:%Y%m%d_%H%M%S}_cam{index}.jpg"

    def take_photo(self, index: int = 0) -> ScanPhoto:
        """Save one frame from camera ``index``.

        Raises:
            ImportError: If OpenCV is not installed.
            RuntimeError: If the camera cannot be opened, read or saved.
        """
        cv2 = _cv2()
        with open_device(index) as device:
            for _ in range(self.warmup_frames):
                device.read()
            ok, frame = device.read()

        if not ok or frame is None:
            raise RuntimeError(f"Could not read a frame from camera {index}.")

        taken_at = datetime.now()
        path = self.photo_path(index, taken_at)
        path.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(path), frame):
            raise RuntimeError(f"Could not save the frame to {path}.")
        logger.info("Saved camera %d frame to %s", index, path)
        return ScanPhoto(camera_index=index, image_path=str(path), taken_at=taken_at)
