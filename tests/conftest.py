"""Pytest fixtures for gaiapy tests."""
import json
from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from gaiapy.core.api import HubConfig, HubConnector, HubTransport
from gaiapy.core.crypto import Secp256k1Crypto
from gaiapy.core.identity import UserIdentity
from gaiapy.core.storage import StorageSession

PRIVATE_KEY = 'a5c61c6ca7b3e7e55edee68566aeab22e4da26baa285c7bd10e8d2218aa3b229'
OTHER_PRIVATE_KEY = 'e4d04ee3b5d2c1f1b0f8a8f8c9c7b4d3e2f1a0b9c8d7e6f5a4b3c2d1e0f9a8b7'


class FakeHub:
    """
    In-process Gaia hub.

    Stores objects in memory, pages listings ``PAGE_SIZE`` entries at a
    time and records every request. ``fail(method, path, status)`` makes a
    request answer with an error status.
    """

    PAGE_SIZE = 2

    def __init__(self):
        self.files: Dict[str, Tuple[bytes, str]] = {}
        self.failures: Dict[Tuple[str, str], int] = {}
        self.requests: List[Tuple[str, str]] = []
        self.batches: List[dict] = []
        self.hub_info: Optional[dict] = None
        self.url: Optional[str] = None

        @web.middleware
        async def record_and_fail(request, handler):
            self.requests.append((request.method, request.path))
            status = self.failures.get((request.method, request.path))
            if status is not None:
                return web.Response(status=status, text='injected failure')
            return await handler(request)

        self.app = web.Application(middlewares=[record_and_fail])
        self.app.router.add_get('/hub_info', self.handle_hub_info)
        self.app.router.add_post('/store/{address}/{path:.*}', self.handle_store)
        self.app.router.add_get('/read/{address}/{path:.*}', self.handle_read)
        self.app.router.add_delete('/delete/{address}/{path:.*}', self.handle_delete)
        self.app.router.add_post('/list-files/{address}', self.handle_list)
        self.app.router.add_post('/perform-files/{address}', self.handle_perform)

    def fail(self, method: str, path: str, status: int) -> None:
        self.failures[(method, path)] = status

    def requests_to(self, prefix: str) -> List[Tuple[str, str]]:
        return [r for r in self.requests if r[1].startswith(prefix)]

    @staticmethod
    def _authorized(request) -> bool:
        return request.headers.get('Authorization', '').startswith('bearer v1:')

    @staticmethod
    def _key(request) -> str:
        return f"{request.match_info['address']}/{request.match_info['path']}"

    async def handle_hub_info(self, request):
        if self.hub_info is not None:
            return web.json_response(self.hub_info)
        return web.json_response({
            'challenge_text': '["gaiahub","0","test-hub","blockstack_storage_please_sign"]',
            'read_url_prefix': f"{request.scheme}://{request.host}/read/",
            'latest_auth_version': 'v1',
        })

    async def handle_store(self, request):
        if not self._authorized(request):
            return web.Response(status=401)
        body = await request.read()
        content_type = request.headers.get('Content-Type', 'application/octet-stream')
        self.files[self._key(request)] = (body, content_type)
        return web.json_response({
            'publicURL': f"{request.scheme}://{request.host}/read/{self._key(request)}"
        })

    async def handle_read(self, request):
        stored = self.files.get(self._key(request))
        if stored is None:
            return web.Response(status=404)
        body, content_type = stored
        return web.Response(body=body, headers={'Content-Type': content_type})

    async def handle_delete(self, request):
        if not self._authorized(request):
            return web.Response(status=401)
        if self.files.pop(self._key(request), None) is None:
            return web.Response(status=404)
        return web.Response(status=202)

    async def handle_list(self, request):
        if not self._authorized(request):
            return web.Response(status=401)
        body = await request.json()
        prefix = f"{request.match_info['address']}/"
        names = sorted(key[len(prefix):] for key in self.files if key.startswith(prefix))

        start = int(body.get('page') or 0)
        end = start + self.PAGE_SIZE
        return web.json_response({
            'entries': names[start:end],
            'page': str(end) if end < len(names) else None,
        })

    async def handle_perform(self, request):
        if not self._authorized(request):
            return web.Response(status=401)
        tree = await request.json()
        self.batches.append(tree)
        return web.Response(text=json.dumps({'status': 'ok'}), content_type='application/json')


@pytest.fixture
def private_key():
    """Identity private key."""
    return PRIVATE_KEY


@pytest.fixture
def other_private_key():
    """A second, unrelated private key."""
    return OTHER_PRIVATE_KEY


@pytest.fixture
def crypto():
    return Secp256k1Crypto()


@pytest.fixture
def identity(private_key):
    return UserIdentity(private_key=private_key)


@pytest_asyncio.fixture
async def fake_hub():
    """Running fake hub; ``hub.url`` is its base URL."""
    hub = FakeHub()
    server = TestServer(hub.app)
    await server.start_server()
    hub.url = f"http://{server.host}:{server.port}"
    yield hub
    await server.close()


@pytest_asyncio.fixture
async def transport():
    transport = HubTransport(HubConfig.default())
    yield transport
    await transport.close()


@pytest_asyncio.fixture
async def storage(fake_hub, transport, identity, crypto):
    """StorageSession connected to the fake hub."""
    session = await HubConnector(transport, crypto).connect(fake_hub.url, identity.private_key)
    return StorageSession(session, transport, identity, crypto=crypto)


@pytest_asyncio.fixture
async def other_storage(fake_hub, transport, other_private_key, crypto):
    """StorageSession of a second user on the same hub."""
    other = UserIdentity(private_key=other_private_key)
    session = await HubConnector(transport, crypto).connect(fake_hub.url, other_private_key)
    return StorageSession(session, transport, other, crypto=crypto)
