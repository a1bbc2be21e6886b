"""
Tests for src/common/logger.py.
Tests JSONFormatter, payload helpers, request context and the api_logger decorator.
"""
import json
import logging
import sys
from unittest.mock import MagicMock

import pytest
from flask import Flask

from src.common.logger import (
    JSONFormatter,
    _is_quiet_path,
    api_logger,
    filter_sensitive_data,
    get_request_context,
    get_request_payload,
    get_response_info,
    summarize_payload,
)


def make_record(msg='msg', level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name='test', level=level, pathname='t.py',
        lineno=1, msg=msg, args=(), exc_info=exc_info
    )


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_format_basic_record(self):
        parsed = json.loads(JSONFormatter().format(make_record()))
        assert parsed['level'] == 'INFO'
        assert parsed['message'] == 'msg'
        assert parsed['logger'] == 'test'
        assert 'timestamp' in parsed

    def test_format_with_exception(self):
        try:
            raise ValueError('test err')
        except ValueError:
            record = make_record('err', logging.ERROR, sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))
        assert parsed['exception']['type'] == 'ValueError'
        assert parsed['exception']['message'] == 'test err'

    def test_format_with_extra_fields(self):
        """Extra dicts passed to the logger end up in the entry"""
        record = make_record('ok')
        record.organization_id = 'org-1'
        record.validation_errors = {'processes': ['bad']}

        parsed = json.loads(JSONFormatter().format(record))
        assert parsed['organization_id'] == 'org-1'
        assert parsed['validation_errors'] == {'processes': ['bad']}
        assert 'msg' not in parsed

    def test_format_non_serializable_extra(self):
        record = make_record()
        record.snapshot = object()
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed['snapshot'].startswith('<object object')


class TestPayloadHelpers:
    def test_filter_sensitive_data(self):
        data = {
            'organizationId': 'org-1',
            'apiKey': 'abc',
            'nested': {'password': 'x', 'wage': 30},
            'items': [{'token': 't'}, {'name': 'ok'}],
        }

        filtered = filter_sensitive_data(data)

        assert filtered['organizationId'] == 'org-1'
        assert filtered['apiKey'] == '[FILTERED]'
        assert filtered['nested'] == {'password': '[FILTERED]', 'wage': 30}
        assert filtered['items'] == [{'token': '[FILTERED]'}, {'name': 'ok'}]

    def test_filter_scalars_pass_through(self):
        assert filter_sensitive_data(5) == 5

    def test_summarize_payload_collapses_long_lists(self):
        payload = {
            'dataset': {'processes': list(range(12)), 'groups': [1, 2]},
            'timeHorizonMonths': 36,
        }

        summary = summarize_payload(payload)

        assert summary['dataset']['processes'] == '[12 items]'
        assert summary['dataset']['groups'] == [1, 2]
        assert summary['timeHorizonMonths'] == 36

    def test_summarize_non_dict(self):
        assert summarize_payload([1, 2]) == [1, 2]


class TestRequestContext:
    @pytest.fixture
    def flask_app(self):
        return Flask(__name__)

    def test_headers(self, flask_app):
        with flask_app.test_request_context('/x', headers={
            'X-Organization-Id': 'org-1',
            'X-Session-Id': 's1',
            'X-Forwarded-For': '10.0.0.1, 10.0.0.2',
            'User-Agent': 'pytest',
        }):
            context = get_request_context()

        assert context == {
            'organization_id': 'org-1',
            'session_id': 's1',
            'client_ip': '10.0.0.1',
            'user_agent': 'pytest',
        }

    def test_outside_request(self):
        assert 'error' in get_request_context()

    def test_request_payload(self, flask_app):
        with flask_app.test_request_context('/x', method='POST', json={'secret': 's', 'group': 'Ops'}):
            assert get_request_payload() == {'secret': '[FILTERED]', 'group': 'Ops'}

    def test_request_payload_not_json(self, flask_app):
        with flask_app.test_request_context('/x', method='POST', data='plain'):
            assert get_request_payload() is None


class TestResponseInfo:
    def test_small_json_response(self, app):
        response = app.response_class(json.dumps({'ok': True}), mimetype='application/json')
        info = get_response_info(response)
        assert info['status_code'] == 200
        assert info['data'] == {'ok': True}

    def test_broken_response(self):
        class BrokenResponse:
            status_code = 500

            @property
            def content_type(self):
                raise ValueError('bad')

        info = get_response_info(BrokenResponse())
        assert info == {'error': 'bad', 'status_code': 500}


class TestApiLogger:
    def test_logs_start_and_success(self, app):
        @api_logger()
        def view():
            return {'ok': True}, 200

        with app.test_request_context('/api/v1/roi/calculate', method='POST', json={'group': 'Ops'}), \
                pytest.MonkeyPatch.context() as mp:
            info = MagicMock()
            mp.setattr(app.logger, 'info', info)
            assert view() == ({'ok': True}, 200)

        events = [call.kwargs['extra']['event'] for call in info.call_args_list]
        assert events == ['API_CALL_START', 'API_CALL_SUCCESS']
        assert info.call_args_list[0].kwargs['extra']['payload'] == {'group': 'Ops'}

    def test_logs_and_reraises_errors(self, app):
        @api_logger(include_payload=False)
        def view():
            raise RuntimeError('boom')

        with app.test_request_context('/api/v1/roi/calculate', method='POST'), \
                pytest.MonkeyPatch.context() as mp:
            error = MagicMock()
            mp.setattr(app.logger, 'error', error)
            with pytest.raises(RuntimeError):
                view()

        extra = error.call_args.kwargs['extra']
        assert extra['event'] == 'API_CALL_ERROR'
        assert extra['error_message'] == 'boom'


class TestMisc:
    @pytest.mark.parametrize('path,quiet', [
        ('/api/v1/health/', True),
        ('/docs', True),
        ('/swagger.json', True),
        ('/api/v1/roi/calculate', False),
    ])
    def test_quiet_paths(self, path, quiet):
        assert _is_quiet_path(path) is quiet
