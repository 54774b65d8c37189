"""
Observability Middleware

Instruments the Flask app with OpenTelemetry and writes one completion log
per request. Feed routes publish their decoded filter count and match count
on ``g``; both are added to the request span and to the log line.
"""

import time
import logging
from flask import Flask, request, g
from opentelemetry import trace
from opentelemetry.instrumentation.flask import FlaskInstrumentor

logger = logging.getLogger(__name__)

# g attribute -> span attribute / log key
FEED_CONTEXT = {
    'active_filters': 'petmatch.feed.active_filters',
    'feed_matched': 'petmatch.feed.matched',
}


def feed_context() -> dict:
    """Feed details recorded by the current request, if it served a feed."""
    return {key: g.get(key) for key in FEED_CONTEXT if g.get(key) is not None}


def add_observability_middleware(app: Flask):
    """Add OpenTelemetry instrumentation and request logging to Flask app."""

    FlaskInstrumentor().instrument_app(app)

    @app.before_request
    def before_request():
        g.start_time = time.time()
        g.trace_id = None

        span = trace.get_current_span()
        if span.is_recording():
            g.trace_id = format(span.get_span_context().trace_id, "032x")
            span.set_attribute("petmatch.endpoint", request.endpoint or "unmatched")

    @app.after_request
    def after_request(response):
        """Log completion with the feed context and expose the trace id."""
        duration_ms = round((time.time() - g.get('start_time', time.time())) * 1000, 2)
        context = feed_context()

        span = trace.get_current_span()
        if span.is_recording():
            span.set_attribute("http.duration_ms", duration_ms)
            for key, value in context.items():
                span.set_attribute(FEED_CONTEXT[key], value)

        logger.info(
            "HTTP request completed",
            extra={
                "method": request.method,
                "path": request.path,
                "endpoint": request.endpoint,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "trace_id": g.get('trace_id'),
                **context
            }
        )

        if g.get('trace_id'):
            response.headers['X-Trace-Id'] = g.trace_id

        return response
