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
from stompcore.protocol.spec import StompSpec

class StompConfig:
    """This is a container for those configuration options which are needed to establish a STOMP session. All parameters are available as attributes with the same name of this object.

    :param login: The login for the STOMP broker.
    :param passcode: The passcode for the STOMP broker.
    :param versions: The STOMP protocol versions we offer in the **accept-version** header, or :obj:`None` (all versions in :attr:`StompSpec.VERSIONS`).
    :param host: The **host** header (virtual host) of the **CONNECT** frame.
    :param clientId: The **client-id** header. Some brokers use it to name durable subscriptions.
    :param heartbeat: A pair (send, receive) of heart-beat intervals in ms which we offer to the broker.
    :param connectTimeout: This is the time (in seconds) to wait for the broker's **CONNECTED** frame.
    :param receiptTimeout: This is the time (in seconds) to wait for a **RECEIPT** frame if a frame is sent synchronously.
    :param sync: Decides whether frames are sent synchronously by default (that is, with a **receipt** header, waiting for the broker's **RECEIPT**).
    """
    def __init__(self, login='', passcode='', versions=None, host=None, clientId=None, heartbeat=(0, 0), connectTimeout=1.0, receiptTimeout=2.0, sync=True):
        self.login = login
        self.passcode = passcode
        self.versions = list(StompSpec.VERSIONS) if (versions is None) else list(versions)
        self.host = host
        self.clientId = clientId
        self.heartbeat = tuple(heartbeat)
        self.connectTimeout = connectTimeout
        self.receiptTimeout = receiptTimeout
        self.sync = sync
