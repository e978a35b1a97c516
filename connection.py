import logging
import socket
import threading
from collections import deque

from protocol import read_message, write_message


class ConnectionClosed(Exception):
    '''
    the connection is closed
    '''


class Connection:
    '''
    one peer of the score service, with a reader and a writer thread
    '''

    def __str__(self):
        return f'Connection {self.remote_address}'

    def __init__(self, socket, remote_address, handle_message, close_callback=None):
        self.socket = socket
        self.remote_address = remote_address
        self.output_messages = deque() # deque is thread safe for append() and popleft()
        self.has_output = threading.Event()
        self.handle_message = handle_message
        self.close_callback = close_callback
        self.lock = threading.Lock()
        self.is_active = True
        self.read_thread = threading.Thread(target=self._read, args=(), daemon=True)
        self.write_thread = threading.Thread(target=self._write, args=(), daemon=True)
        self.read_thread.start()
        self.write_thread.start()

    def _write(self):
        try:
            while self.is_active:
                self.has_output.wait(0.5)
                self.has_output.clear()
                while self.output_messages:
                    message = self.output_messages.popleft()
                    write_message(self.socket.sendall, message)
        except Exception as e:
            logging.info(f'{self} disconnected with exception in write: {e}')
            self.close()

    def write_message(self, message):
        if not self.is_active:
            # the caller is expected to drop this connection
            raise ConnectionClosed(f'{self} is closed')
        self.output_messages.append(message)
        self.has_output.set()

    def _read(self):
        try:
            while self.is_active:
                message = read_message(self.socket.recv)
                try:
                    self.handle_message(self, message)
                except Exception:
                    logging.exception(f'exception raised when handling {message} from {self}')
        except ConnectionError:
            logging.debug(f'{self} closed by peer')
            self.close()
        except Exception as e:
            logging.info(f'{self} disconnected with exception in read: {e}')
            self.close()

    def close(self):
        # reader, writer and server threads might call close() at the same time
        with self.lock:
            if not self.is_active:
                return
            self.is_active = False
        self.has_output.set()
        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        finally:
            self.socket.close()
        if self.close_callback:
            self.close_callback(self)
            self.close_callback = None
