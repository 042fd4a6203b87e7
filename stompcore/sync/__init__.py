from .client import Stomp
from .transport import StompFrameTransport
