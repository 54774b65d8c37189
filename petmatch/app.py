"""
Pet Match API - Flask Application Entry Point

This module builds the Flask application with OpenAPI 3.0 support, wires the
collaborator clients and registers the feed and donor endpoints.
"""

import os
from flask_openapi3 import OpenAPI, Info, Tag

from . import __version__
from .middleware.error_handler import ErrorHandlerMiddleware
from .models.base import utc_now
from .observability.config import setup_observability
from .observability.middleware import add_observability_middleware
from .routes.donors import donors_bp
from .routes.requests import requests_bp
from .services.hal import create_hal_formatter
from .services.pets import PetRegistryClient
from .services.solicitudes import RequestFeedClient

# OpenAPI info
info = Info(
    title="Pet Match API",
    version=__version__,
    description="Blood donation request feed and donor matching for veterinary clinics"
)

health_tag = Tag(name="Health", description="System health and status")


def create_app(request_feed_client=None, pet_registry=None, config=None, clock=None) -> OpenAPI:
    """
    Build the Flask application.

    Args:
        request_feed_client: Request Feed Supplier (defaults to RequestFeedClient)
        pet_registry: Pet Registry (defaults to PetRegistryClient)
        config: Extra Flask config values, applied last
        clock: Returns the reference time for eligibility checks

    Returns:
        Configured application
    """
    # Initialize observability first
    setup_observability()

    app = OpenAPI(__name__, info=info)

    # Environment configuration
    app.config['ENVIRONMENT'] = os.getenv('ENVIRONMENT', 'development')
    app.config['DEBUG'] = app.config['ENVIRONMENT'] == 'development'
    app.config['OTEL_ENABLED'] = os.getenv('OTEL_ENABLED', 'true').lower() == 'true'
    app.config['SERVICE_VERSION'] = os.getenv('SERVICE_VERSION', __version__)

    # API configuration
    app.config['BASE_URL'] = os.getenv('BASE_URL', 'http://localhost:5000')
    if config:
        app.config.update(config)

    add_observability_middleware(app)

    hal_formatter = create_hal_formatter(app.config['BASE_URL'])
    ErrorHandlerMiddleware(app, hal_formatter)

    # Make services available to routes
    app.hal_formatter = hal_formatter
    app.request_feed_client = request_feed_client or RequestFeedClient()
    app.pet_registry = pet_registry or PetRegistryClient()
    app.clock = clock or utc_now

    app.register_api(requests_bp)
    app.register_api(donors_bp)

    @app.get('/api/healthz', tags=[health_tag])
    def health_check():
        """Liveness check. Collaborators are not probed."""
        links = {
            'self': hal_formatter.builder.link_builder.build_self_link('/api/healthz'),
            'requests': hal_formatter.builder.link_builder.build_link(
                '/api/requests', title="Donation request feed"
            )
        }
        return {
            "status": "healthy",
            "service": "petmatch-api",
            "version": app.config['SERVICE_VERSION'],
            "environment": app.config['ENVIRONMENT'],
            "timestamp": utc_now().isoformat(),
            "_links": {rel: link.model_dump(exclude_none=True) for rel, link in links.items()}
        }, 200

    return app


if __name__ == '__main__':
    create_app().run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=os.getenv('ENVIRONMENT', 'development') == 'development'
    )
