import json
import struct
import logging

from config import MAX_MESSAGE_SIZE

HEADER = struct.Struct('!i')


class ProtocolError(Exception):
    '''
    malformed or oversized frame
    '''

#usign the length of the message to read the message and convert them to data
def read_n_bytes(read, n):
    data = bytearray()
    while len(data) < n:
        chunk = read(n - len(data))
        if not chunk:
            raise ConnectionError('peer closed the connection')
        data += chunk
    return bytes(data)

#read message from the socket and convert them to json
def read_message(read):
    # read message size as a four-byte integer value in network order
    size = HEADER.unpack(read_n_bytes(read, HEADER.size))[0]
    if size < 0 or size > MAX_MESSAGE_SIZE:
        raise ProtocolError(f'bad message size {size}')
    # read message as json data
    try:
        message = json.loads(read_n_bytes(read, size))
    except ValueError as e:
        raise ProtocolError(f'bad message body: {e}') from e
    if not isinstance(message, dict):
        raise ProtocolError(f'expected an object, got {type(message).__name__}')
    logging.debug(f'read message: {message}')
    return message

#write message to the socket and convert them to json
def write_message(write, message):
    logging.debug(f'write message: {message}')
    data = json.dumps(message).encode()
    if len(data) > MAX_MESSAGE_SIZE:
        raise ProtocolError(f'message too large: {len(data)} bytes')
    write(HEADER.pack(len(data)) + data)
