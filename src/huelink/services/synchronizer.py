import logging
import threading
from typing import Optional

from huelink.services.device_service import DeviceService

logger = logging.getLogger(__name__)

DEFAULT_SYNC_INTERVAL = 10.0  # seconds


class Synchronizer:
    """
    Calls synchronize() on a set of devices every `interval` seconds.

    The loop runs in one background thread. Requests still go through the
    bridge, which serializes them with everything else sent to it.
    """

    def __init__(self, interval: float = DEFAULT_SYNC_INTERVAL):
        self.set_interval(interval)
        self._devices: list[DeviceService] = []
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __len__(self):
        return len(self._devices)

    @property
    def devices(self) -> list[DeviceService]:
        with self._lock:
            return list(self._devices)

    @property
    def interval(self) -> float:
        return self._interval

    def set_interval(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"'interval' must be positive!\n{interval=}")
        self._interval = interval

    @property
    def is_active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def add(self, device: DeviceService) -> bool:
        with self._lock:
            if any(d is device for d in self._devices):
                return False
            self._devices.append(device)
            return True

    def remove(self, device: DeviceService) -> bool:
        with self._lock:
            for i, d in enumerate(self._devices):
                if d is device:
                    del self._devices[i]
                    return True
            return False

    def clear(self) -> int:
        with self._lock:
            count = len(self._devices)
            self._devices.clear()
            return count

    def tick(self) -> int:
        """
        Synchronize every device once. Returns how many succeeded.
        A device that raises is logged and counted as failed.
        """
        synced = 0
        for device in self.devices:
            try:
                if device.synchronize():
                    synced += 1
            except Exception:
                logger.exception("Synchronizing %r failed", device)
        return synced

    def start(self) -> bool:
        if self.is_active:
            return False
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="huelink-sync", daemon=True)
        self._thread.start()
        logger.debug("Synchronizer started, interval %.1fs", self._interval)
        return True

    def stop(self, timeout: Optional[float] = None) -> bool:
        if not self.is_active:
            return False
        self._stop_event.set()
        self._thread.join(timeout)
        self._thread = None
        logger.debug("Synchronizer stopped")
        return True

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            synced = self.tick()
            logger.debug("Synchronized %d/%d devices", synced, len(self))
