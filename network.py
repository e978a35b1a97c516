import socket
import logging

from protocol import read_message, write_message, ProtocolError
from config import SCORE_SERVER_PORT, LEADERBOARD_LIMIT


class Identity:
    '''
    who is playing, if anyone logged in; only used to pre-fill the name
    '''

    def __init__(self, user=None, token=None):
        self.user = user
        self.token = token

    def current_user(self):
        return self.user

    def auth_token(self):
        return self.token

    def default_name(self, fallback='guest'):
        if self.user and self.user.get('name'):
            return self.user['name']
        return fallback


class ScoreClient:
    '''
    talks to the score server, one connection per request

    failures never raise: submit_score returns False and fetch_top_scores
    returns an empty list so gameplay is never affected.
    last_error holds the reason of the last failed request, None after a success
    '''

    def __init__(self, server_addr=('localhost', SCORE_SERVER_PORT), timeout=3.0):
        self.server_addr = server_addr
        self.timeout = timeout
        self.last_error = None

    def _request(self, message):
        with socket.create_connection(self.server_addr, timeout=self.timeout) as client:
            write_message(client.sendall, message)
            return read_message(client.recv)

    def submit_score(self, name, score, token=None):
        message = {
            'action': 'submit_score',
            'name': name,
            'score': score,
        }
        if token:
            message['token'] = token
        try:
            reply = self._request(message)
        except (OSError, ProtocolError) as e:
            self.last_error = str(e) or type(e).__name__
            logging.warning(f'error submitting score: {e}')
            return False
        if not reply.get('success'):
            self.last_error = reply.get('error') or 'score rejected'
            logging.warning(f'score rejected: {reply.get("error")}')
            return False
        self.last_error = None
        return True

    def fetch_top_scores(self, limit=LEADERBOARD_LIMIT):
        try:
            reply = self._request({'action': 'top_scores', 'limit': limit})
        except (OSError, ProtocolError) as e:
            self.last_error = str(e) or type(e).__name__
            logging.warning(f'error fetching leaderboard: {e}')
            return []
        if not reply.get('success'):
            self.last_error = reply.get('error') or 'leaderboard unavailable'
            logging.warning(f'failed to fetch leaderboard: {reply.get("error")}')
            return []
        self.last_error = None
        return reply.get('data') or []
