"""The :mod:`~.protocol` package is a collection of generic components each of which you can use independently for your own STOMP related functionality.

.. note:: Please restrict your imports to the main package :mod:`stompcore.protocol`. The subpackage structure is potentially unstable.
"""
from . import commands
from .dialect import StompDialect, StompProtocol, StompVersion
from .frame import StompFrame, StompMap
from .heartbeat import StompHeartbeatEmitter, StompLivenessDetector
from .observer import StompConnectionObserver, StompObserverCollection
from .parser import StompParser
from .session import StompSession
from .spec import StompSpec
