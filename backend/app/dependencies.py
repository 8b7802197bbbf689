"""Request-scoped accessors for the services built in the lifespan."""

from fastapi import Request

from app.services.lifecycle import AppServices


def get_services(request: Request) -> AppServices:
    return request.app.state.services
