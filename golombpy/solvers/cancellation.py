"""
    Primitives shared between search workers.

    Workers never share search state. The only things they share are a
    `CancelToken`, polled at every step of the search, and a `ResultSlot`
    that accepts exactly one ruler.

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        CancelToken
        ResultSlot
"""
import threading


class CancelToken(object):
    """
        Cooperative cancellation flag.

        Wraps an event object, a `threading.Event` by default. Any object with
        `set()`, `clear()` and `is_set()` works, e.g. a `multiprocessing` event
        to reach workers in other processes.
    """

    def __init__(self, event=None):
        self._event = threading.Event() if event is None else event
        # bound method, polled in the innermost search loop
        self.is_set = self._event.is_set

    def cancel(self):
        """
            Signal all workers polling this token to stop. Idempotent and thread-safe.
        """
        self._event.set()

    def reset(self):
        self._event.clear()

    @property
    def event(self):
        return self._event

    def __repr__(self):
        return f"CancelToken(cancelled={self.is_set()})"


class ResultSlot(object):
    """
        Single-assignment cell, the first offered value wins
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._value = None

    def offer(self, value):
        """
            Store `value` if the slot is still empty.

            :return: True if `value` was stored, False if another value got there first
        """
        with self._lock:
            if self._value is not None:
                return False
            self._value = value
            return True

    @property
    def value(self):
        return self._value

    def is_filled(self):
        return self._value is not None
