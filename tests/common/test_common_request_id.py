# ===============================================================================
# COMMON REQUEST ID TESTS
# ===============================================================================

import logging

from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase

from apps.common.logging import RequestIDFilter, clear_request_id, get_request_id, set_request_id
from apps.common.middleware import RequestIDMiddleware


class RequestIDMiddlewareTestCase(SimpleTestCase):
    """Test request correlation ids"""

    def test_id_is_visible_during_request_and_cleared_after(self):
        seen = {}

        def view(request):
            seen['request_id'] = get_request_id()
            seen['meta'] = request.META['REQUEST_ID']
            return HttpResponse('ok')

        response = RequestIDMiddleware(view)(RequestFactory().post('/integrations/webhooks/payments/'))

        self.assertEqual(seen['request_id'], seen['meta'])
        self.assertEqual(response['X-Request-ID'], seen['request_id'])
        self.assertIsNone(get_request_id())


class RequestIDFilterTestCase(SimpleTestCase):
    """Test log record enrichment"""

    def _record(self):
        return logging.LogRecord('apps', logging.INFO, __file__, 1, 'message', None, None)

    def test_outside_request(self):
        record = self._record()

        RequestIDFilter().filter(record)

        self.assertEqual(record.request_id, '-')

    def test_inside_request(self):
        set_request_id('abc-123')
        try:
            record = self._record()
            self.assertTrue(RequestIDFilter().filter(record))
        finally:
            clear_request_id()

        self.assertEqual(record.request_id, 'abc-123')
