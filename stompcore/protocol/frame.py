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
import simplejson

from stompcore.util import uniqueId

from .spec import StompSpec

_ESCAPE = [('\\', '\\\\'), ('\r', '\\r'), ('\n', '\\n'), (':', '\\c')]
_ESCAPE_LEGACY = [('\n', '\\n')]

def escape(value, legacyMode=False):
    for (character, replacement) in (_ESCAPE_LEGACY if legacyMode else _ESCAPE):
        value = value.replace(character, replacement)
    return value

class StompFrame:
    """This object represents a STOMP frame which consists of a STOMP :attr:`command`, :attr:`headers`, and a message :attr:`body`. Its wire-level representation is rendered by :meth:`toBytes`.

    :param command: A valid STOMP command.
    :param headers: The STOMP headers (represented as a :class:`dict` or a sequence of pairs). If a header name occurs more than once, the first occurrence wins.
    :param body: The message body, either :class:`bytes` or a :class:`str` (which is UTF-8 encoded).
    :param legacyMode: Render the frame STOMP 1.0 style: only line feeds are escaped in headers, and no **content-length** header is injected.
    :param lengthHint: Always render a **content-length** header for a non-empty body, even if it contains no NUL byte.

    .. note :: A header whose value is :obj:`None` or the empty string is not stored. Headers which were received without a value (no colon on the header line) carry the value :obj:`True`.
    """
    INFO_LENGTH = 20

    def __init__(self, command='', headers=None, body=b'', legacyMode=False, lengthHint=False):
        self.command = command
        self.headers = {}
        self.body = body
        self.legacyMode = legacyMode
        self.lengthHint = lengthHint
        if headers:
            self.addHeaders(headers)

    @property
    def body(self):
        return self._body

    @body.setter
    def body(self, body):
        self._body = body.encode('utf-8') if isinstance(body, str) else bytes(body)

    def get(self, name, default=None):
        return self.headers.get(name, default)

    def set(self, name, value):
        """Set a header. An absent value (:obj:`None` or the empty string) removes the header instead."""
        if (value is None) or (value == ''):
            self.headers.pop(name, None)
            return
        self.headers[name] = value if (value is True) else str(value)

    def addHeaders(self, headers):
        """Add headers which are not yet present in this frame; existing headers keep their value."""
        items = headers.items() if isinstance(headers, dict) else headers
        for (name, value) in items:
            if name not in self.headers:
                self.set(name, value)

    def ensureMessageId(self):
        """Return the **message-id** header. If there is none, a random one is generated and stored in this frame first."""
        if not self.get(StompSpec.MESSAGE_ID_HEADER):
            self.set(StompSpec.MESSAGE_ID_HEADER, uniqueId())
        return self.get(StompSpec.MESSAGE_ID_HEADER)

    def isErrorFrame(self):
        return self.command == StompSpec.ERROR

    def encodedBody(self):
        return self.body

    def toBytes(self):
        """Render the wire-level STOMP frame."""
        body = self.encodedBody()
        headers = dict(self.headers)
        if (not self.legacyMode) and body and (self.lengthHint or (StompSpec.FRAME_DELIMITER in body)):
            headers[StompSpec.CONTENT_LENGTH_HEADER] = str(len(body))
        lines = [self.command]
        for (name, value) in headers.items():
            name = escape(name, self.legacyMode)
            lines.append(name if (value is True) else '%s%s%s' % (name, StompSpec.HEADER_SEPARATOR, escape(value, self.legacyMode)))
        return b''.join([
            '\n'.join(lines).encode('utf-8'),
            StompSpec.LINE_DELIMITER * 2,
            body,
            StompSpec.FRAME_DELIMITER
        ])

    __bytes__ = toBytes

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, ', '.join('%s=%r' % (key, getattr(self, key)) for key in ('command', 'headers', 'body')))

    def __eq__(self, other):
        return all(getattr(self, key) == getattr(other, key, None) for key in ('command', 'headers', 'body'))

    def info(self):
        """Produce a log-friendly representation of the frame (show only non-trivial content, and truncate the message to INFO_LENGTH bytes.)"""
        headers = self.headers and 'headers=%s' % self.headers
        body = self.body[:self.INFO_LENGTH]
        if body != self.body:
            body = body + b'...'
        body = body and ('body=%r' % body)
        info = ', '.join(i for i in (headers, body) if i)
        return '%s frame%s' % (self.command, info and (' [%s]' % info))

class StompMap(StompFrame):
    """A frame whose body is a JSON encoded map (**transformation:jms-map-json**), as understood by ActiveMQ. The decoded structure is available as :attr:`map`.

    :param bodyOrStructure: Either the raw JSON body (:class:`bytes` or :class:`str`) of a received frame, or the structure to be sent.
    """
    def __init__(self, bodyOrStructure, headers=None, command=StompSpec.SEND, legacyMode=False, lengthHint=False):
        super().__init__(command, headers, b'', legacyMode, lengthHint)
        if isinstance(bodyOrStructure, (bytes, str)):
            self.body = bodyOrStructure
            self.map = simplejson.loads(self.body.decode('utf-8')) if self.body else {}
        else:
            self.map = bodyOrStructure
            self.set(StompSpec.TRANSFORMATION_HEADER, StompSpec.TRANSFORMATION_JMS_MAP_JSON)

    def encodedBody(self):
        self.body = simplejson.dumps(self.map)
        return self.body

    def __eq__(self, other):
        return all(getattr(self, key) == getattr(other, key, None) for key in ('command', 'headers', 'map'))
