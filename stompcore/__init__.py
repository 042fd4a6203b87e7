"""STOMP 1.0, 1.1 and 1.2 client protocol engine: frames, an incremental parser, broker dialects, heart-beats, and a stateful session on top of a synchronous client."""
