from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

from pfandfinder.domain.models import Hotspot

HotspotListener = Callable[[Tuple[Hotspot, ...]], None]


class HotspotChannel:
    """Publishes each analysis run's hotspot list to subscribers.

    Only the latest list is kept. Publishing is fire-and-forget: a listener
    that raises is recorded in ``errors`` and the remaining listeners still
    receive the list.
    """

    def __init__(self) -> None:
        self._listeners: List[HotspotListener] = []
        self._latest: Tuple[Hotspot, ...] = ()
        self.errors: list[tuple[HotspotListener, Exception]] = []

    @property
    def latest(self) -> Tuple[Hotspot, ...]:
        return self._latest

    def subscribe(self, listener: HotspotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, hotspots: Sequence[Hotspot]) -> None:
        self._latest = tuple(hotspots)
        self.errors = []
        for listener in list(self._listeners):
            try:
                listener(self._latest)
            except Exception as exc:
                print(f"[hotspots] WARNING: listener {listener!r} failed ({exc})")
                self.errors.append((listener, exc))
