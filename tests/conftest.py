import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from backend import CollabBackend
from executor import ExecutionProxy

PISTON_OK = {
    "language": "python",
    "version": "3.10.0",
    "run": {"stdout": "hi\n", "stderr": "", "code": 0, "output": "hi\n"},
}


def piston_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=PISTON_OK)


@pytest.fixture
def backend():
    return CollabBackend()


@pytest.fixture
def executor():
    return ExecutionProxy(api_url="http://piston.test/execute", transport=httpx.MockTransport(piston_handler))


@pytest.fixture
def app(backend, executor):
    return create_app(backend=backend, executor=executor)


@pytest.fixture
def client(app):
    # entering the client shares one event loop between HTTP calls and websockets
    with TestClient(app) as client:
        yield client
