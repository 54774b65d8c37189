# SPDX-License-Identifier: Apache-2.0

"""
Donation request feed endpoints.

The query string is decoded with the URL codec, records come from the
Request Feed Supplier and are filtered locally with the compiled predicate.
Responses are HAL collections whose links carry the canonical filter
encoding.
"""

from flask import request, current_app, g
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from pydantic import BaseModel, Field
import logging
from typing import Callable, List, Tuple

from ..domain.filter_state import active_filter_count
from ..domain.predicates import Predicate, compile_clinic_predicate, compile_predicate, filter_requests
from ..domain.url_codec import decode, encode, to_query_string
from ..middleware.error_handler import ValidationException
from ..models.entities import DonationRequest
from ..models.filters import FilterState

# Set up logging and tracing
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

requests_tag = Tag(name="Requests", description="Donation request feed")
requests_bp = APIBlueprint(
    'requests',
    __name__,
    url_prefix='/api',
    abp_tags=[requests_tag]
)


def parse_pagination() -> Tuple[int, int]:
    """Read page and page_size from the query string."""
    try:
        page = int(request.args.get('page', 1))
        page_size = int(request.args.get('page_size', DEFAULT_PAGE_SIZE))
    except ValueError:
        raise ValidationException(
            "Invalid pagination parameters",
            [{"field": "page", "message": "page and page_size must be integers"}]
        )

    if page < 1 or page_size < 1:
        raise ValidationException(
            "Invalid pagination parameters",
            [{"field": "page", "message": "page and page_size must be positive"}]
        )

    return page, min(page_size, MAX_PAGE_SIZE)


def render_feed(
    span_name: str,
    collection_path: str,
    fetch: Callable[[FilterState], List[DonationRequest]],
    compile_fn: Callable[[FilterState], Predicate]
):
    """Decode filters, fetch, filter and paginate one feed."""
    state = decode(request.args)
    page, page_size = parse_pagination()

    with tracer.start_as_current_span(span_name) as span:
        span.set_attributes({
            "feed.active_filters": active_filter_count(state),
            "feed.page": page,
            "feed.page_size": page_size
        })

        records = fetch(state)
        matches = filter_requests(records, state, compile_fn(state))

        start = (page - 1) * page_size
        page_items = matches[start:start + page_size]

        span.set_attributes({
            "feed.fetched": len(records),
            "feed.matched": len(matches)
        })
        g.active_filters = active_filter_count(state)
        g.feed_matched = len(matches)
        span.set_status(Status(StatusCode.OK))

        logger.info(
            "Request feed served",
            extra={
                "path": collection_path,
                "active_filters": active_filter_count(state),
                "fetched": len(records),
                "matched": len(matches),
                "page": page
            }
        )

        response = current_app.hal_formatter.format_request_feed(
            page_items,
            len(matches),
            page,
            page_size,
            collection_path,
            encode(state)
        )
        response['filters'] = {
            'active_count': active_filter_count(state),
            'query': to_query_string(state)
        }
        return response, 200


@requests_bp.get('/requests')
def list_active_requests():
    """
    Public feed of active donation requests.

    Filters: especie, tipo_sangre, urgencia, localidad (repeatable),
    busqueda and ubicacion. Only active requests are ever returned.
    """
    return render_feed(
        "requests.list_active",
        "/api/requests",
        current_app.request_feed_client.list_active,
        compile_predicate
    )


@requests_bp.get('/clinic/requests')
def list_clinic_requests():
    """
    Clinic view of donation requests, restricted to the ``estado`` tab.
    """
    return render_feed(
        "requests.list_clinic",
        "/api/clinic/requests",
        current_app.request_feed_client.list_for_clinic,
        compile_clinic_predicate
    )


class RequestPath(BaseModel):
    request_id: str = Field(..., min_length=1, description="Donation request identifier")


@requests_bp.get('/requests/<request_id>')
def get_request(path: RequestPath):
    """
    One donation request, as linked from the feed items.
    """
    with tracer.start_as_current_span("requests.get") as span:
        span.set_attribute("request.id", path.request_id)

        donation_request = current_app.request_feed_client.get_request(path.request_id)

        logger.info(
            "Donation request served",
            extra={"request_id": donation_request.id, "status": donation_request.status.value}
        )
        return current_app.hal_formatter.format_donation_request(donation_request), 200
