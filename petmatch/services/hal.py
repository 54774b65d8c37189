# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
HAL (Hypertext Application Language) response formatting utilities.
Builds feed collections, request resources and RFC 7807 problem documents.
"""

from typing import Dict, List, Any, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlencode
import math

from ..models.entities import DonationRequest
from ..models.responses import HalLink
from ..domain.vocabulary import (
    URGENCY_LABELS, locality_label, species_label
)

QueryParams = Sequence[Tuple[str, Any]]


class HalLinkBuilder:
    """Builder for HAL links with proper URL construction."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/') + '/'

    def build_link(
        self,
        path: str,
        method: str = "GET",
        content_type: Optional[str] = None,
        title: Optional[str] = None,
        templated: bool = False
    ) -> HalLink:
        """Build a HAL link with proper URL construction."""
        href = urljoin(self.base_url, path.lstrip('/'))

        return HalLink(
            href=href,
            method=method,
            type=content_type,
            title=title,
            templated=templated or None
        )

    def build_self_link(self, resource_path: str) -> HalLink:
        """Build self link for a resource."""
        return self.build_link(resource_path, title="Self")

    def build_action_link(
        self,
        resource_path: str,
        action: str,
        method: str = "POST",
        title: Optional[str] = None
    ) -> HalLink:
        """Build action link for a resource."""
        action_path = f"{resource_path}/{action}"
        return self.build_link(
            action_path,
            method=method,
            content_type="application/json",
            title=title or action.title()
        )


class PaginationLinkBuilder:
    """Builder for pagination links in HAL collections."""

    def __init__(self, base_url: str):
        self.link_builder = HalLinkBuilder(base_url)

    def _page_link(
        self,
        base_path: str,
        params: QueryParams,
        page: int,
        page_size: int,
        title: str
    ) -> HalLink:
        query = urlencode(list(params) + [('page', page), ('page_size', page_size)])
        return self.link_builder.build_link(f"{base_path}?{query}", title=title)

    def build_pagination_links(
        self,
        base_path: str,
        current_page: int,
        total_pages: int,
        page_size: int,
        query_params: Optional[QueryParams] = None
    ) -> Dict[str, HalLink]:
        """
        Build pagination links for a collection.

        ``query_params`` is a list of pairs so repeated filter parameters
        survive into every link.
        """
        links = {}
        params = list(query_params or [])

        links['self'] = self._page_link(base_path, params, current_page, page_size, "Current page")

        if current_page > 1:
            links['first'] = self._page_link(base_path, params, 1, page_size, "First page")
            links['prev'] = self._page_link(
                base_path, params, current_page - 1, page_size, "Previous page"
            )

        if current_page < total_pages:
            links['next'] = self._page_link(
                base_path, params, current_page + 1, page_size, "Next page"
            )
            links['last'] = self._page_link(base_path, params, total_pages, page_size, "Last page")

        return links


class HalResponseBuilder:
    """Main HAL response builder."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/')
        self.link_builder = HalLinkBuilder(base_url)
        self.pagination_builder = PaginationLinkBuilder(base_url)

    def build_collection_response(
        self,
        items: List[Dict[str, Any]],
        total: int,
        page: int,
        page_size: int,
        collection_path: str,
        query_params: Optional[QueryParams] = None,
        embedded_name: str = 'items'
    ) -> Dict[str, Any]:
        """Build a HAL collection response with pagination links."""
        total_pages = max(1, math.ceil(total / page_size)) if page_size > 0 else 1

        pagination_links = self.pagination_builder.build_pagination_links(
            collection_path,
            page,
            total_pages,
            page_size,
            query_params
        )

        return {
            'total': total,
            'page': page,
            'page_size': page_size,
            'total_pages': total_pages,
            '_links': {
                rel: link.model_dump(exclude_none=True) for rel, link in pagination_links.items()
            },
            '_embedded': {
                embedded_name: items
            }
        }

    def build_error_response(
        self,
        error_type: str,
        title: str,
        status: int,
        detail: str,
        instance: str,
        validation_errors: Optional[List[Dict[str, Any]]] = None,
        retryable: Optional[bool] = None
    ) -> Dict[str, Any]:
        """Build RFC 7807 compliant error response with HAL links."""
        error_response = {
            'type': f"https://api.petmatch.co/problems/{error_type}",
            'title': title,
            'status': status,
            'detail': detail,
            'instance': instance
        }

        if validation_errors:
            error_response['errors'] = validation_errors

        if retryable is not None:
            error_response['retryable'] = retryable

        links = {
            'help': self.link_builder.build_link(
                f"/docs/errors#{error_type}",
                title="Error documentation"
            )
        }

        if error_type == "validation-error":
            links['schema'] = self.link_builder.build_link(
                "/openapi/openapi.json",
                title="API schema"
            )

        error_response['_links'] = {
            rel: link.model_dump(exclude_none=True) for rel, link in links.items()
        }
        return error_response


class HalFormatter:
    """High-level HAL formatter with convenience methods."""

    def __init__(self, base_url: str):
        self.builder = HalResponseBuilder(base_url)

    def format_donation_request(self, donation_request: DonationRequest) -> Dict[str, Any]:
        """Format a donation request with display labels and HAL links."""
        data = donation_request.model_dump(mode='json')
        data['species_label'] = species_label(donation_request.species)
        data['locality_label'] = locality_label(donation_request.locality)
        data['urgency_label'] = URGENCY_LABELS[donation_request.urgency]

        resource_path = f"/api/requests/{donation_request.id}"
        links = {
            'self': self.builder.link_builder.build_self_link(resource_path),
            'compatibility': self.builder.link_builder.build_link(
                "/api/donors/compatibility",
                method="POST",
                content_type="application/json",
                title="Check donor compatibility"
            )
        }
        if donation_request.is_active():
            links['eligibility'] = self.builder.link_builder.build_link(
                "/api/donors/eligibility",
                method="POST",
                content_type="application/json",
                title="Check donor eligibility"
            )

        data['_links'] = {rel: link.model_dump(exclude_none=True) for rel, link in links.items()}
        return data

    def format_request_feed(
        self,
        requests: List[DonationRequest],
        total: int,
        page: int,
        page_size: int,
        collection_path: str,
        filter_params: Optional[QueryParams] = None
    ) -> Dict[str, Any]:
        """Format a page of the request feed."""
        items = [self.format_donation_request(item) for item in requests]
        return self.builder.build_collection_response(
            items,
            total,
            page,
            page_size,
            collection_path,
            filter_params,
            embedded_name='requests'
        )

    def format_validation_error(
        self,
        detail: str,
        instance: str,
        validation_errors: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Format a validation error response."""
        return self.builder.build_error_response(
            "validation-error",
            "Validation Error",
            400,
            detail,
            instance,
            validation_errors
        )

    def format_not_found_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format a not found error response."""
        return self.builder.build_error_response(
            "resource-not-found",
            "Resource Not Found",
            404,
            detail,
            instance
        )

    def format_service_unavailable_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format an upstream failure; the client may retry."""
        return self.builder.build_error_response(
            "service-unavailable",
            "Service Unavailable",
            503,
            detail,
            instance,
            retryable=True
        )

    def format_server_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format a server error response."""
        return self.builder.build_error_response(
            "internal-server-error",
            "Internal Server Error",
            500,
            detail,
            instance
        )


def create_hal_formatter(base_url: str) -> HalFormatter:
    """Create a HAL formatter instance."""
    return HalFormatter(base_url)
