"""Tests for :mod:`restapi.middleware`."""

import logging
import uuid

from flask import Flask

from restapi import middleware
from restapi.context import current_context
from restapi.middleware import BaseMiddleware, wrap


def make_recorder(name, calls):
    """Generate a middleware class that records the order of calls."""
    class Recorder(BaseMiddleware):
        def before(self, environ, start_response):
            calls.append(f'{name}:before')
            return environ, start_response

        def after(self, environ, response):
            calls.append(f'{name}:after')
            return response

    Recorder.__name__ = name
    return Recorder


def test_wrap_order():
    """The first middleware sees the request first and the response last."""
    calls = []
    app = Flask('test')

    @app.route('/')
    def index():
        calls.append('app')
        return 'ok'

    wrap(app, [make_recorder('outer', calls), make_recorder('inner', calls)])
    app.test_client().get('/')
    assert calls == ['outer:before', 'inner:before', 'app',
                     'inner:after', 'outer:after']
    assert set(app.middlewares) == {'outer', 'inner'}


def test_request_id(app, client):
    """Every response carries a request id, which the app can see."""
    seen = []

    @app.route('/echo')
    def echo():
        seen.append(current_context().request_id)
        return 'ok'

    first = client.get('/echo')
    second = client.get('/echo')
    request_id = first.headers['X-Request-ID']
    assert uuid.UUID(request_id)
    assert seen[0] == request_id
    assert second.headers['X-Request-ID'] != request_id


def test_request_id_on_errors(client):
    """Error responses carry a request id too."""
    response = client.get('/nowhere')
    assert response.status_code == 404
    assert response.headers['X-Request-ID']


def test_request_log(client, caplog):
    """Requests are logged when they start and when they complete."""
    logger = f'{middleware.__name__}.request_log'
    with caplog.at_level(logging.INFO, logger=logger):
        response = client.get('/status')
    records = [r for r in caplog.records if r.name == logger]
    assert [r.getMessage().split()[0] for r in records] \
        == ['started', 'completed']
    assert records[0].getMessage() == 'started GET /status'
    assert records[1].status == 200
    assert records[1].duration >= 0
    assert records[0].request_id == response.headers['X-Request-ID']
    assert records[1].getMessage().startswith('completed with 200 OK in ')


def test_cors(client):
    """Responses allow any origin."""
    response = client.get('/status', headers={'Origin': 'http://foo.com'})
    assert response.headers['Access-Control-Allow-Origin'] == '*'


def test_cors_preflight(client):
    """Preflight requests are answered by the middleware."""
    response = client.options('/users', headers={
        'Origin': 'http://foo.com',
        'Access-Control-Request-Method': 'POST'
    })
    assert response.status_code == 200
    assert 'POST' in response.headers['Access-Control-Allow-Methods']
    assert response.headers['Access-Control-Allow-Origin'] == '*'
    assert response.headers['X-Request-ID']
