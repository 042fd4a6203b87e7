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
import collections
import itertools
import logging

from stompcore.error import StompDrainingError, StompStateError
from stompcore.util import uniqueId

from .spec import StompSpec

LOG_CATEGORY = __name__

Producer = collections.namedtuple('Producer', [])
ProducerTransaction = collections.namedtuple('ProducerTransaction', ['transaction'])
Consumer = collections.namedtuple('Consumer', ['subscriptions'])
ConsumerTransaction = collections.namedtuple('ConsumerTransaction', ['transaction', 'subscriptions'])
Draining = collections.namedtuple('Draining', [])
DrainingTransaction = collections.namedtuple('DrainingTransaction', ['transaction'])

_PRODUCERS = [Producer, ProducerTransaction]
_CONSUMERS = [Consumer, ConsumerTransaction]
_DRAINING = [Draining, DrainingTransaction]

class Subscription(collections.namedtuple('Subscription', ['destination', 'selector', 'ack', 'id', 'headers'])):
    def belongsTo(self, frame):
        """Whether a **MESSAGE** frame was delivered to this subscription."""
        return frame.get(StompSpec.SUBSCRIPTION_HEADER) == self.id

class StompSession:
    """This object implements the client side of a STOMP session as a state machine. It makes sure that you only issue commands which are legal in the current state, and it keeps track of subscriptions and of the active transaction.

    :param client: A connected client (see :class:`~stompcore.sync.client.Stomp`). The session sends its frames via :meth:`sendFrame` and :meth:`send`, builds them with the client's :attr:`protocol`, and reads with :meth:`readFrame`.

    The states are

    * :class:`Producer`: no subscription, no transaction (the initial state),
    * :class:`ProducerTransaction`: no subscription, within a transaction,
    * :class:`Consumer`: at least one subscription,
    * :class:`ConsumerTransaction`: at least one subscription, within a transaction,
    * :class:`Draining` and :class:`DrainingTransaction`: the last subscription is gone, but the client still buffers frames which have to be read before the session reverts to :class:`Producer` (or :class:`ProducerTransaction`).

    A command which is not legal in the current state raises a :class:`~stompcore.error.StompStateError` (a :class:`~stompcore.error.StompDrainingError` while draining) and leaves the state untouched.
    """
    def __init__(self, client):
        self.log = logging.getLogger(LOG_CATEGORY)
        self.client = client
        self._subscriptionIds = itertools.count()
        self._state = Producer()

    @property
    def state(self):
        """The current state."""
        return self._state

    @property
    def transaction(self):
        """The id of the active transaction, or :obj:`None`."""
        return getattr(self._state, 'transaction', None)

    def currentSubscriptions(self):
        return list(getattr(self._state, 'subscriptions', ()))

    @property
    def _protocol(self):
        return self.client.protocol

    # commands

    def send(self, destination, bodyOrFrame=b'', headers=None):
        """Send a message. Within a transaction, the message is stamped with the transaction id and sent without waiting for a receipt."""
        transaction = self.transaction
        if transaction is None:
            return self.client.send(destination, bodyOrFrame, headers)
        headers = dict(headers or {})
        headers[StompSpec.TRANSACTION_HEADER] = transaction
        return self.client.send(destination, bodyOrFrame, headers, sync=False)

    def subscribe(self, destination, selector=None, ack=StompSpec.ACK_AUTO, headers=None):
        """Subscribe to a destination and return the id of the new subscription.

        :param headers: Additional headers for the **SUBSCRIBE** frame. They do not override the headers built by the protocol.
        """
        self.__check('subscribe', _PRODUCERS + _CONSUMERS)
        subscription = Subscription(destination, selector, ack, str(next(self._subscriptionIds)), dict(headers or {}))
        frame = self._protocol.getSubscribeFrame(destination, subscription.id, ack, selector)
        frame.addHeaders(subscription.headers)
        self.client.sendFrame(frame)
        subscriptions = tuple(self.currentSubscriptions()) + (subscription,)
        transaction = self.transaction
        self._transition(Consumer(subscriptions) if (transaction is None) else ConsumerTransaction(transaction, subscriptions))
        return subscription.id

    def unsubscribe(self, subscriptionId=None):
        """End a subscription.

        :param subscriptionId: The id returned by :meth:`subscribe`, or :obj:`None` (the most recent subscription).
        """
        self.__check('unsubscribe', _CONSUMERS)
        subscriptions = self._state.subscriptions
        if subscriptionId is None:
            subscription = subscriptions[-1]
        else:
            subscription = next((s for s in subscriptions if s.id == subscriptionId), None)
            if subscription is None:
                raise StompStateError(self._state, 'unsubscribe', 'No such subscription [%s]' % subscriptionId)
        self.client.sendFrame(self._protocol.getUnsubscribeFrame(subscription.destination, subscription.id))
        remaining = tuple(s for s in subscriptions if s is not subscription)
        transaction = self.transaction
        if remaining:
            state = Consumer(remaining) if (transaction is None) else ConsumerTransaction(transaction, remaining)
        elif self.client.isBufferEmpty():
            state = Producer() if (transaction is None) else ProducerTransaction(transaction)
        else:
            state = Draining() if (transaction is None) else DrainingTransaction(transaction)
        self._transition(state)

    def begin(self):
        """Begin a transaction with a fresh id. Returns the transaction id."""
        self.__check('begin', [Producer, Consumer])
        transaction = uniqueId()
        self.client.sendFrame(self._protocol.getBeginFrame(transaction))
        self._transition(ProducerTransaction(transaction) if isinstance(self._state, Producer) else ConsumerTransaction(transaction, self._state.subscriptions))
        return transaction

    def commit(self):
        self.__check('commit', [ProducerTransaction, ConsumerTransaction])
        self.client.sendFrame(self._protocol.getCommitFrame(self.transaction))
        self._endTransaction()

    def abort(self):
        self.__check('abort', [ProducerTransaction, ConsumerTransaction])
        self.client.sendFrame(self._protocol.getAbortFrame(self.transaction))
        self._endTransaction()

    def ack(self, frame):
        """Acknowledge a received **MESSAGE** frame (within the active transaction, if any)."""
        self.__check('ack', _CONSUMERS + _DRAINING)
        self.client.sendFrame(self._protocol.getAckFrame(frame, self.transaction), sync=False)

    def nack(self, frame, requeue=None):
        """Reject a received **MESSAGE** frame (within the active transaction, if any).

        :param requeue: See :meth:`~stompcore.protocol.dialect.StompProtocol.getNackFrame`.
        """
        self.__check('nack', _CONSUMERS + _DRAINING)
        self.client.sendFrame(self._protocol.getNackFrame(frame, self.transaction, requeue), sync=False)

    def read(self):
        """Read the next frame, or :obj:`None` if there is none. While draining, the first :obj:`None` ends the draining state."""
        self.__check('read', _CONSUMERS + _DRAINING)
        frame = self.client.readFrame()
        if (frame is None) and (type(self._state) in _DRAINING):
            transaction = self.transaction
            self._transition(Producer() if (transaction is None) else ProducerTransaction(transaction))
        return frame

    # helpers

    def _endTransaction(self):
        if isinstance(self._state, ConsumerTransaction):
            self._transition(Consumer(self._state.subscriptions))
        else:
            self._transition(Producer())

    def _transition(self, state):
        self.log.debug('%s -> %s' % (type(self._state).__name__, type(state).__name__))
        self._state = state

    def __check(self, command, states):
        if type(self._state) in states:
            return
        if type(self._state) in _DRAINING:
            raise StompDrainingError(self._state, command)
        raise StompStateError(self._state, command)
