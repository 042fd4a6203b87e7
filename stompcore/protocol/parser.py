"""
Copyright 2011, 2012 Mozes, Inc.

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
import re

import simplejson

from stompcore.error import StompFrameError

from .frame import StompFrame, StompMap
from .spec import StompSpec

LOG_CATEGORY = __name__

_LINES = re.compile(rb'(?:\r?\n)+')
_ESCAPED = re.compile(r'\\.')
_UNESCAPE = {'\\\\': '\\', '\\r': '\r', '\\n': '\n', '\\c': ':'}
_UNESCAPE_LEGACY = {'\\n': '\n'}

def _unescaper(table):
    def _unescape(value):
        return _ESCAPED.sub(lambda match: table.get(match.group(0), match.group(0)), value)
    return _unescape

unescape = _unescaper(_UNESCAPE)
unescapeLegacy = _unescaper(_UNESCAPE_LEGACY)

class StompParser:
    """This is a parser for a wire-level byte-stream of STOMP frames.

    :param legacyMode: Parse STOMP 1.0 style: header values are not unescaped (except for line feeds), and stray NUL bytes between frames are not skipped.
    :param observer: An optional connection observer which is notified of received heart-beats (:meth:`emptyLineReceived`) and frames (:meth:`receivedFrame`).

    Feed data with :meth:`feed`, and call :meth:`nextFrame` until it returns :obj:`None` to drain all frames which are available so far.
    """
    HEADER, BODY = 'HEADER', 'BODY'
    HEADER_STOP_CR_LF = b'\r\n\r\n'
    HEADER_STOP_LF = b'\n\n'

    def __init__(self, legacyMode=False, observer=None):
        self.log = logging.getLogger(LOG_CATEGORY)
        self.legacyMode = legacyMode
        self.observer = observer
        self._buffer = bytearray()
        self._reset()

    def feed(self, data):
        """Add a chunk of wire-level data."""
        self._buffer.extend(data)

    def nextFrame(self):
        """Return the next complete frame as a :class:`StompFrame` (or :class:`StompMap`) object, or :obj:`None` if more data is needed.
        """
        if not self._buffer:
            return None
        if self._mode == self.HEADER:
            self._skipEmptyLines()
            if not self._detectFrameHead():
                return None
            self._mode = self.BODY
        frame = self._detectFrameEnd()
        if (frame is not None) and self.observer:
            self.observer.receivedFrame(frame)
        return frame

    def isEmpty(self):
        """Whether there is neither buffered data nor a partially parsed frame."""
        return (not self._buffer) and (self._mode == self.HEADER)

    def flush(self):
        """Reset the parser state and return all data which has not been parsed into a frame yet.
        """
        remainder = bytes(self._buffer)
        self._buffer = bytearray()
        self._reset()
        return remainder

    def _reset(self):
        self._mode = self.HEADER
        self._command = None
        self._headers = []
        self._expectedLength = None

    def _skipEmptyLines(self):
        skip = b'\r\n' if self.legacyMode else b'\r\n\x00'
        offset = 0
        while (offset < len(self._buffer)) and (self._buffer[offset] in skip):
            offset += 1
        if not offset:
            return
        del self._buffer[:offset]
        if self.observer:
            self.observer.emptyLineReceived()

    def _detectFrameHead(self):
        stops = [(self._buffer.find(stop), stop) for stop in (self.HEADER_STOP_CR_LF, self.HEADER_STOP_LF)]
        stops = [(position, stop) for (position, stop) in stops if position != -1]
        if not stops:
            return False
        position, stop = min(stops)
        self._extractFrameMeta(bytes(self._buffer[:position]))
        del self._buffer[:position + len(stop)]
        return True

    def _extractFrameMeta(self, source):
        lines = _LINES.split(source)
        self._command = lines[0]
        names = set()
        for line in lines[1:]:
            name, separator, value = line.partition(b':')
            if name in names:
                continue
            names.add(name)
            self._headers.append((name, value if separator else True))
            if name == b'content-length':
                self._expectedLength = self._contentLength(value if separator else None)

    def _contentLength(self, value):
        try:
            length = int(value)
        except (TypeError, ValueError):
            self.log.warning('Ignoring invalid content-length header [%r]' % value)
            self._headers[-1] = (self._headers[-1][0], True)
            return None
        return length if (length > 0) else None

    def _detectFrameEnd(self):
        if self._expectedLength is not None:
            if len(self._buffer) <= self._expectedLength:
                return None
            size = self._expectedLength
        else:
            size = self._buffer.find(StompSpec.FRAME_DELIMITER)
            if size == -1:
                return None
        body = bytes(self._buffer[:size])
        del self._buffer[:size + len(StompSpec.FRAME_DELIMITER)]
        command, headers = self._command, self._headers
        self._reset()
        return self._createFrame(command, headers, body)

    def _createFrame(self, command, headers, body):
        decode = unescapeLegacy if self.legacyMode else unescape
        try:
            command = command.decode('utf-8')
            headers = [(decode(name.decode('utf-8')), value if (value is True) else decode(value.decode('utf-8'))) for (name, value) in headers]
        except UnicodeDecodeError as e:
            raise StompFrameError('Invalid header encoding [%s]' % e)
        if dict(headers).get(StompSpec.TRANSFORMATION_HEADER) == StompSpec.TRANSFORMATION_JMS_MAP_JSON:
            try:
                return StompMap(body, headers, command, legacyMode=self.legacyMode)
            except (UnicodeDecodeError, simplejson.JSONDecodeError) as e:
                raise StompFrameError('Invalid map body [%s]' % e)
        return StompFrame(command, headers, body, legacyMode=self.legacyMode)
