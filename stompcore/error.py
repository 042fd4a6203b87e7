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
class StompError(Exception):
    """Base class for STOMP errors
    """

class StompFrameError(StompError):
    """Raised for error parsing STOMP frames
    """

class StompProtocolError(StompError):
    """Raised for STOMP protocol errors (a frame which cannot be built for the negotiated version or broker)
    """

class StompUnexpectedResponse(StompProtocolError):
    """Raised if the broker answers with a frame we did not expect
    """
    def __init__(self, frame, info):
        self.frame = frame
        super().__init__('Unexpected response received. %s [%s]' % (info, frame.info()))

class StompBrokerError(StompError):
    """Raised if the broker sent an **ERROR** frame
    """
    def __init__(self, frame):
        self.frame = frame
        super().__init__('Error "%s"' % (frame.get('message') or frame.body.decode('utf-8', 'replace')))

class StompStateError(StompError):
    """Raised for a command which is not allowed in the current session state
    """
    def __init__(self, state, command, info=None):
        self.state = state
        self.command = command
        message = '"%s" is not allowed in "%s".' % (command, type(state).__name__)
        super().__init__(('%s %s' % (message, info)) if info else message)

class StompDrainingError(StompStateError):
    """Raised for a command which is not allowed while buffered frames are still being drained
    """
    def __init__(self, state, command):
        super().__init__(state, command, 'Please make sure that there is no draining message left. Call read until it returns None.')

class StompConnectionError(StompError):
    """Raised for nonexistent connection
    """

class StompHeartbeatError(StompConnectionError):
    """Raised if the connection is presumed dead (missed heart-beats or a failed heart-beat write)
    """

class StompConfigurationError(StompError):
    """Raised for a connection configuration which cannot work with the negotiated session
    """

class StompTimeoutError(StompError):
    """Raised if a deadline expired while waiting for a response frame
    """

class StompConnectTimeout(StompTimeoutError):
    """Raised for timeout waiting for connect response from broker
    """

class StompMissingReceipt(StompTimeoutError):
    """Raised for timeout waiting for a **RECEIPT** frame
    """
    def __init__(self, receipt):
        self.receipt = receipt
        super().__init__('Missing receipt frame for id "%s". Maybe the broker is under heavy load. Try to increase timeouts.' % receipt)
