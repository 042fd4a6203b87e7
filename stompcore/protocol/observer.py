"""
Copyright 2012 Mozes, Inc.

   Licensed under the Apache License, Version 2.0 (the "License");
   you may not use this file except in compliance with the License.
   You may obtain a copy of the License at

       http://www.apache.org/licenses/LICENSE-2.0

   Unless required by applicable law or agreed to in writing, software
   distributed under the License is distributed on an "AS IS" BASIS,
   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either expressed or implied.
   See the License for the specific language governing permissions and
   limitations under the License.
"""
class StompConnectionObserver:
    """Base class for objects which watch the traffic of a STOMP connection. All notifications are no-ops unless overridden."""
    def emptyLineReceived(self):
        """A heart-beat (one run of line feeds) was received."""

    def emptyRead(self):
        """A read attempt returned no data."""

    def emptyBuffer(self):
        """The transport had data, but not enough for a complete frame."""

    def receivedFrame(self, frame):
        pass

    def sentFrame(self, frame):
        pass

class StompObserverCollection(StompConnectionObserver):
    """Forwards all notifications to its observers, in the order in which they were added. Adding an observer twice has no effect."""
    def __init__(self, observers=None):
        self._observers = []
        for observer in (observers or []):
            self.add(observer)

    def add(self, observer):
        if not any(o is observer for o in self._observers):
            self._observers.append(observer)
        return self

    def remove(self, observer):
        self._observers = [o for o in self._observers if o is not observer]
        return self

    @property
    def observers(self):
        return list(self._observers)

    def emptyLineReceived(self):
        for observer in self._observers:
            observer.emptyLineReceived()

    def emptyRead(self):
        for observer in self._observers:
            observer.emptyRead()

    def emptyBuffer(self):
        for observer in self._observers:
            observer.emptyBuffer()

    def receivedFrame(self, frame):
        for observer in self._observers:
            observer.receivedFrame(frame)

    def sentFrame(self, frame):
        for observer in self._observers:
            observer.sentFrame(frame)
