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
class StompSpec:
    """This class hosts all constants related to the STOMP protocol specification in its various versions. There really isn't much to document, but you are invited to take a look at all available constants in the source code."""
    VERSION_1_0, VERSION_1_1, VERSION_1_2 = '1.0', '1.1', '1.2'
    VERSIONS = [VERSION_1_0, VERSION_1_1, VERSION_1_2]
    DEFAULT_VERSION = VERSION_1_0

    ABORT = 'ABORT'
    ACK = 'ACK'
    BEGIN = 'BEGIN'
    COMMIT = 'COMMIT'
    CONNECT = 'CONNECT'
    DISCONNECT = 'DISCONNECT'
    NACK = 'NACK'
    SEND = 'SEND'
    SUBSCRIBE = 'SUBSCRIBE'
    UNSUBSCRIBE = 'UNSUBSCRIBE'

    CONNECTED = 'CONNECTED'
    ERROR = 'ERROR'
    MESSAGE = 'MESSAGE'
    RECEIPT = 'RECEIPT'

    LINE_DELIMITER = b'\n'
    CARRIAGE_RETURN = b'\r'
    FRAME_DELIMITER = b'\x00'
    HEADER_SEPARATOR = ':'
    HEART_BEAT_SEPARATOR = ','

    ACCEPT_VERSION_HEADER = 'accept-version'
    ACK_HEADER = 'ack'
    CLIENT_ID_HEADER = 'client-id'
    CONTENT_LENGTH_HEADER = 'content-length'
    DESTINATION_HEADER = 'destination'
    HEART_BEAT_HEADER = 'heart-beat'
    HOST_HEADER = 'host'
    ID_HEADER = 'id'
    LOGIN_HEADER = 'login'
    MESSAGE_HEADER = 'message'
    MESSAGE_ID_HEADER = 'message-id'
    PASSCODE_HEADER = 'passcode'
    RECEIPT_HEADER = 'receipt'
    RECEIPT_ID_HEADER = 'receipt-id'
    SELECTOR_HEADER = 'selector'
    SESSION_HEADER = 'session'
    SERVER_HEADER = 'server'
    SUBSCRIPTION_HEADER = 'subscription'
    TRANSACTION_HEADER = 'transaction'
    TRANSFORMATION_HEADER = 'transformation'
    VERSION_HEADER = 'version'

    ACK_AUTO = 'auto'
    ACK_CLIENT = 'client'
    ACK_CLIENT_INDIVIDUAL = 'client-individual'
    CLIENT_ACK_MODES = {
        VERSION_1_0: {ACK_AUTO, ACK_CLIENT},
        VERSION_1_1: {ACK_AUTO, ACK_CLIENT, ACK_CLIENT_INDIVIDUAL},
        VERSION_1_2: {ACK_AUTO, ACK_CLIENT, ACK_CLIENT_INDIVIDUAL}
    }

    TRANSFORMATION_JMS_MAP_JSON = 'jms-map-json'

    SERVER_ACTIVEMQ = 'activemq'
    SERVER_APOLLO = 'apache-apollo'
    SERVER_OPENMQ = 'open message queue'
    SERVER_RABBITMQ = 'rabbitmq'
