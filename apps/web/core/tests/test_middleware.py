"""Tests for BackendSessionMiddleware."""

from django.urls import reverse

import httpx
from supra_schemas import Role

from apps.web.core.auth import SESSION_TOKEN_KEY, SESSION_USER_KEY
from apps.web.core.tests.factories import (
    MenuCategoryFactory,
    RestaurantFactory,
    SessionUserFactory,
    make_token,
)


def mock_home(backend_api):
    backend_api.get("/restaurants").mock(return_value=httpx.Response(200, json=[RestaurantFactory()]))
    backend_api.get("/menu-categories").mock(return_value=httpx.Response(200, json=[MenuCategoryFactory()]))


class TestSessionState:
    """Tests for attaching the signed-in user to requests."""

    def test_guest_sees_sign_in_links(self, client, backend_api):
        mock_home(backend_api)

        response = client.get(reverse("catalog:home"))

        assert response.status_code == 200
        assert b"Sign in" in response.content
        assert response.wsgi_request.backend_user is None
        assert response.wsgi_request.backend.is_authenticated is False

    def test_signed_in_user_is_attached(self, client, backend_api, login_as):
        mock_home(backend_api)
        login_as(Role.USER, first_name="Nino", last_name="Beridze")

        response = client.get(reverse("catalog:home"))

        assert response.wsgi_request.backend_user.full_name == "Nino Beridze"
        assert response.wsgi_request.backend.is_authenticated is True
        assert b"Nino Beridze" in response.content

    def test_token_is_sent_to_backend(self, client, backend_api, login_as):
        mock_home(backend_api)
        login_as()

        client.get(reverse("catalog:home"))

        request = backend_api.calls.last.request
        assert request.headers["Authorization"].startswith("Bearer ")

    def test_expired_token_signs_out(self, client, backend_api):
        mock_home(backend_api)
        session = client.session
        session[SESSION_TOKEN_KEY] = make_token(expires_in=-60)
        session[SESSION_USER_KEY] = SessionUserFactory()
        session.save()

        response = client.get(reverse("catalog:home"))

        assert response.wsgi_request.backend_user is None
        assert SESSION_TOKEN_KEY not in client.session
        assert b"Sign in" in response.content


class TestBackendErrors:
    """Tests for backend failures escaping views."""

    def test_rejected_token_redirects_to_login(self, client, backend_api, login_as):
        login_as()
        backend_api.get("/cart").mock(return_value=httpx.Response(401, json={"message": "Unauthorized"}))

        response = client.get(reverse("cart:detail"))

        assert response.status_code == 302
        assert response.url == "/auth/login/?next=%2Fcart%2F"
        assert SESSION_TOKEN_KEY not in client.session

    def test_rejected_form_post_returns_to_referring_page(self, client, backend_api, login_as):
        login_as()
        backend_api.delete("/cart/item/5").mock(
            return_value=httpx.Response(401, json={"message": "Unauthorized"})
        )

        response = client.post(
            reverse("cart:remove_item", args=[5]), headers={"Referer": "http://testserver/cart/?step=1"}
        )

        assert response.url == "/auth/login/?next=%2Fcart%2F%3Fstep%3D1"

    def test_rejected_post_from_elsewhere_has_no_next(self, client, backend_api, login_as):
        login_as()
        backend_api.delete("/cart/item/5").mock(
            return_value=httpx.Response(401, json={"message": "Unauthorized"})
        )

        response = client.post(
            reverse("cart:remove_item", args=[5]), headers={"Referer": "https://evil.example/cart/"}
        )

        assert response.url == reverse("accounts:login")

    def test_missing_resource_renders_404(self, client, backend_api):
        backend_api.get("/restaurants/99").mock(
            return_value=httpx.Response(404, json={"message": "Restaurant not found"})
        )

        response = client.get(reverse("catalog:restaurant_detail", args=[99]))

        assert response.status_code == 404
        assert b"Restaurant not found" in response.content

    def test_unreachable_backend_renders_503(self, client, backend_api):
        backend_api.get("/restaurants/1").mock(side_effect=httpx.ConnectError("refused"))

        response = client.get(reverse("catalog:restaurant_detail", args=[1]))

        assert response.status_code == 503
        assert b"Network error" in response.content

    def test_server_error_renders_502(self, client, backend_api):
        backend_api.get("/restaurants/1").mock(return_value=httpx.Response(500, json={"message": "boom"}))

        response = client.get(reverse("catalog:restaurant_detail", args=[1]))

        assert response.status_code == 502
        assert b"Internal server error" in response.content
