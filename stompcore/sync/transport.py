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
import logging

from stompcore.error import StompBrokerError, StompConnectionError
from stompcore.protocol import StompObserverCollection, StompParser

LOG_CATEGORY = __name__

class StompFrameTransport:
    """Reads and writes STOMP frames over a duplex byte channel. The channel does the actual I/O and has to provide

    * :meth:`read(maxBytes)`: non-blocking; an empty result means that there is no data right now,
    * :meth:`canRead(timeout)`: wait until there is data to read, at most **timeout** seconds (or indefinitely if **timeout** is :obj:`None`), returning whether there is,
    * :meth:`write(data)`,
    * :meth:`isConnected()`,
    * :meth:`sendAlive(timeout)`: write a single heart-beat byte, returning whether that worked,
    * :meth:`readTimeout()`: a pair (seconds, microseconds),
    * :meth:`close()`.

    Any :class:`OSError` raised by the channel is reported as a :class:`~stompcore.error.StompConnectionError`.

    :param channel: The duplex byte channel.
    :param observers: Connection observers (for instance, heart-beat observers) which watch the traffic.
    """
    READ_SIZE = 8192

    def __init__(self, channel, observers=None):
        self.log = logging.getLogger(LOG_CATEGORY)
        self.channel = channel
        self.observers = StompObserverCollection(observers)
        self.parser = StompParser(observer=self.observers)

    def __str__(self):
        return '%s(%s)' % (self.__class__.__name__, self.channel)

    def isConnected(self):
        return self.channel.isConnected()

    def isBufferEmpty(self):
        return self.parser.isEmpty()

    def readTimeout(self):
        return self.channel.readTimeout()

    def canRead(self, timeout=None):
        """Wait until the channel has data to read. This does not guarantee that the data completes a frame."""
        self._check()
        try:
            return self.channel.canRead(timeout)
        except OSError as e:
            raise StompConnectionError('Connection closed [%s]' % e) from e

    def writeFrame(self, frame):
        self._check()
        if self.log.isEnabledFor(logging.DEBUG):
            self.log.debug('Sending %s' % frame.info())
        try:
            self.channel.write(frame.toBytes())
        except OSError as e:
            raise StompConnectionError('Could not send to connection [%s]' % e) from e
        self.observers.sentFrame(frame)

    def readFrame(self):
        """Return the next frame, or :obj:`None` if the channel has no more data for now. An **ERROR** frame raises a :class:`~stompcore.error.StompBrokerError`."""
        fed = False
        while True:
            frame = self.parser.nextFrame()
            if frame is not None:
                return self._onFrame(frame)
            if fed:
                self.observers.emptyBuffer()
            data = self._read()
            if not data:
                self.observers.emptyRead()
                return None
            self.parser.feed(data)
            fed = True

    def sendAlive(self, timeout=None):
        self._check()
        try:
            alive = self.channel.sendAlive(timeout)
        except OSError as e:
            raise StompConnectionError('Could not send heart-beat [%s]' % e) from e
        if not alive:
            raise StompConnectionError('Could not send heart-beat')

    def close(self):
        try:
            self.channel.close()
        except OSError as e:
            raise StompConnectionError('Could not close connection cleanly [%s]' % e) from e
        finally:
            remainder = self.parser.flush()
            if remainder:
                self.log.warning('Dropping %d unparsed bytes' % len(remainder))

    def _onFrame(self, frame):
        if self.log.isEnabledFor(logging.DEBUG):
            self.log.debug('Received %s' % frame.info())
        if frame.isErrorFrame():
            raise StompBrokerError(frame)
        return frame

    def _read(self):
        self._check()
        try:
            return self.channel.read(self.READ_SIZE)
        except OSError as e:
            raise StompConnectionError('Connection closed [%s]' % e) from e

    def _check(self):
        if not self.channel.isConnected():
            raise StompConnectionError('Not connected')
