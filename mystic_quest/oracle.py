"""
Oracle Client
==============
Talks to the Oracle proxy over HTTP. Calls are best-effort: any failure
turns into a fixed fallback line and never reaches the game loop.

Narrator runs requests on a worker pool and hands the answers back
through a queue, so only the loop thread ever writes game-visible state.
"""

import itertools
import logging
import queue
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Dict, List, NamedTuple, Optional

import requests

from .lore import ORACLE_FALLBACK

logger = logging.getLogger(__name__)


class OracleReply(NamedTuple):
    text: str
    ok: bool


class Delivery(NamedTuple):
    request_id: int
    kind: str
    reply: OracleReply


class OracleClient:
    """Blocking client for POST {prompt, ...} -> {response}."""

    def __init__(self, url: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def ask(self, prompt: str, **context) -> OracleReply:
        payload = {'prompt': prompt}
        payload.update({k: v for k, v in context.items() if v is not None})
        try:
            resp = self.session.post(self.url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            text = resp.json()['response']
        except requests.RequestException as e:
            logger.warning('Oracle request failed: %s', e)
            return OracleReply(ORACLE_FALLBACK, False)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning('Oracle returned an unusable body: %s', e)
            return OracleReply(ORACLE_FALLBACK, False)

        if not isinstance(text, str) or not text.strip():
            return OracleReply(ORACLE_FALLBACK, False)
        return OracleReply(text.strip(), True)


class Narrator:
    """
    Fire-and-forget front end for an OracleClient.

    request() returns immediately; drain() hands back whatever finished
    since the last call. Nothing is cancelled, and answers arrive in
    completion order, not issue order.
    """

    def __init__(self, client: OracleClient, executor: Optional[Executor] = None):
        self.client = client
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix='oracle'
        )
        self._deliveries: 'queue.Queue[Delivery]' = queue.Queue()
        self._ids = itertools.count(1)
        self._in_flight: Dict[int, str] = {}  # request id -> kind
        self._futures: List[Future] = []

    def request(self, prompt: str, kind: str = 'omen', **context) -> int:
        request_id = next(self._ids)
        self._in_flight[request_id] = kind
        logger.debug('Oracle request #%d (%s)', request_id, kind)
        self._futures = [f for f in self._futures if not f.done()]
        self._futures.append(
            self._executor.submit(self._run, request_id, kind, prompt, context)
        )
        return request_id

    def _run(self, request_id: int, kind: str, prompt: str, context: dict) -> None:
        try:
            reply = self.client.ask(prompt, **context)
        except Exception:
            logger.exception('Oracle worker crashed on request #%d', request_id)
            reply = OracleReply(ORACLE_FALLBACK, False)
        self._deliveries.put(Delivery(request_id, kind, reply))

    def drain(self) -> List[Delivery]:
        delivered = []
        while True:
            try:
                delivery = self._deliveries.get_nowait()
            except queue.Empty:
                break
            self._in_flight.pop(delivery.request_id, None)
            delivered.append(delivery)
        return delivered

    def is_waiting(self, kind: Optional[str] = None) -> bool:
        """True while a request (of the given kind, if any) has not been drained."""
        if kind is None:
            return bool(self._in_flight)
        return kind in self._in_flight.values()

    def shutdown(self) -> None:
        """Drop requests that have not started; a running one is left to time out."""
        for future in self._futures:
            future.cancel()
        self._futures = []
        self._executor.shutdown(wait=False)
