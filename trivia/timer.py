class CallbackTimer:
    """
    A single cancellable delayed callback, advanced by the owner's update(dt) tick.
    Scheduling replaces whatever was pending; at most one callback is ever armed.
    """

    def __init__(self):
        self._callback = None
        self._remaining = 0.0

    def schedule(self, delay: float, callback):
        self._callback = callback
        self._remaining = delay

    def cancel(self):
        self._callback = None
        self._remaining = 0.0

    def tick(self, dt: float):
        if self._callback is None:
            return
        self._remaining -= dt
        if self._remaining <= 0:
            callback = self._callback
            self.cancel()
            callback()

    @property
    def pending(self) -> bool:
        return self._callback is not None

    @property
    def time_remaining(self) -> float:
        return max(0.0, self._remaining) if self._callback else 0.0
