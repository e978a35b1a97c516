import socket
import threading
import queue
import logging
from datetime import datetime, timezone

from connection import Connection, ConnectionClosed
from ranking import RankingStore
from config import SCORE_SERVER_PORT, LEADERBOARD_LIMIT


class ScoreServer:
    '''
    keeps the best scores of finished games and serves the leaderboard

    identities maps auth tokens to user names; a submission carrying a known
    token is recorded under that name instead of the one typed in.
    '''

    def __init__(self, port=SCORE_SERVER_PORT, host='0.0.0.0', identities=None):
        self.listen_socket = socket.socket()
        self.listen_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.listen_socket.bind((host, port))
        self.listen_socket.listen()
        self.address = self.listen_socket.getsockname()
        self.port = self.address[1]

        self.identities = dict(identities or {})
        self.ranking = RankingStore()
        self.ranking_lock = threading.Lock()
        self.connections = {}
        self.messages_from_clients = queue.Queue()
        self.is_active = False

    def start(self):
        self.is_active = True
        self._accept_client_thread = threading.Thread(target=self._accept_client, args=(), daemon=True)
        self._accept_client_thread.start()
        self._handle_messages_thread = threading.Thread(target=self._handle_messages, args=(), daemon=True)
        self._handle_messages_thread.start()
        logging.info(f'score server listening on {self.address}')

    def serve_forever(self):
        self.start()
        try:
            self._handle_messages_thread.join()
        except KeyboardInterrupt:
            logging.info('interrupted')
        finally:
            self.close()

    def close(self):
        # safe to call more than once, and before start()
        self.is_active = False
        try:
            # wakes up the blocked accept()
            self.listen_socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        finally:
            self.listen_socket.close()
        for connection in list(self.connections.values()):
            connection.close()

    def remove_connection(self, connection):
        # do not throw exceptions here!
        logging.debug(f'remove {connection}')
        self.connections.pop(connection.remote_address, None)

    def write_message(self, connection, message):
        try:
            connection.write_message(message)
        except ConnectionClosed:
            self.remove_connection(connection)

    def _accept_client(self):
        while self.is_active:
            try:
                client_socket, client_address = self.listen_socket.accept()
            except OSError:
                # listen socket closed
                break
            connection = Connection(client_socket, client_address,
                lambda connection, message: self.messages_from_clients.put((connection, message)),
                self.remove_connection)
            self.connections[client_address] = connection
            logging.info(f'{client_address} connected')

    def submit_score(self, name, score, token=None):
        '''
        record a finished game, returns (entry, error)
        '''
        if token and token in self.identities:
            name = self.identities[token]
        if not isinstance(name, str) or not name.strip():
            return None, 'Name and score are required'
        if score is None:
            return None, 'Name and score are required'
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            return None, 'Score must be a non-negative integer'
        created_at = datetime.now(timezone.utc).isoformat()
        entry = {'name': name.strip(), 'score': score, 'createdAt': created_at}
        with self.ranking_lock:
            self.ranking.insert(entry['name'], score, created_at)
        logging.info(f'score {score} recorded for {entry["name"]}')
        return entry, None

    def top_scores(self, limit=LEADERBOARD_LIMIT):
        with self.ranking_lock:
            return self.ranking.top(limit)

    def handle_message(self, message):
        '''
        build the reply to a single request
        '''
        action = message.get('action', None)
        if action == 'ping':
            return message
        elif action == 'submit_score':
            entry, error = self.submit_score(message.get('name'), message.get('score'), message.get('token'))
            if error:
                return {'action': action, 'success': False, 'error': error}
            return {'action': action, 'success': True, 'entry': entry}
        elif action == 'top_scores':
            try:
                limit = int(message.get('limit') or LEADERBOARD_LIMIT)
            except (TypeError, ValueError):
                limit = LEADERBOARD_LIMIT
            return {'action': action, 'success': True, 'data': self.top_scores(limit)}
        logging.warning(f'unknown message: {message}')
        return {'action': action, 'success': False, 'error': f'unknown action {action!r}'}

    def _handle_messages(self):
        while self.is_active:
            try:
                connection, message = self.messages_from_clients.get(timeout=0.5)
            except queue.Empty:
                continue
            self.write_message(connection, self.handle_message(message))


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument('-p', '--port', type=int, default=SCORE_SERVER_PORT)
    parser.add_argument('--host', default='0.0.0.0')
    args = parser.parse_args()
    ScoreServer(args.port, args.host).serve_forever()
