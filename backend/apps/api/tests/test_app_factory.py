"""Tests for FastAPI app factory behavior."""

from rex_api.main import create_app


def _paths(app) -> set[str]:
    return {route.path for route in app.routes}


def test_create_app_returns_independent_instances() -> None:
    """Factory should return separate apps with their own override maps."""
    app_one = create_app()
    app_two = create_app()

    app_one.dependency_overrides[object] = lambda: None

    assert app_one is not app_two
    assert app_two.dependency_overrides == {}


def test_create_app_registers_routes() -> None:
    """All API surfaces should be mounted under /api."""
    paths = _paths(create_app())

    assert "/api/health" in paths
    assert "/api/users/me" in paths
    assert "/api/users/search" in paths
    assert "/api/things/{thing_id}/comments" in paths
    assert "/api/interactions/{interaction_id}/like" in paths
    assert "/api/comments/{comment_id}" in paths
    assert "/api/recommendations/received" in paths
    assert "/api/feed" in paths
    assert "/api/feed/source" in paths
    assert "/api/share/{thing_id}" in paths
    assert "/api/interactions/{interaction_id}/tags" in paths
    assert "/api/tags/pending" in paths
    assert "/api/tags/{tag_id}/accept" in paths
