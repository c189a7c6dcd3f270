from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory, TestCase

from crm.exceptions import AuthenticationError, AuthorizationError
from crm.identity import Identity, resolve_identity
from crm.models import User
from crm.tests.helpers import make_user


class IdentityTest(TestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_resolve_from_session_user(self):
        user = make_user(User.Role.ADMIN, "LOC-A")
        request = self.factory.get("/")
        request.user = user

        identity = resolve_identity(request)
        self.assertEqual(identity.user_id, user.pk)
        self.assertEqual(identity.location_id, "LOC-A")
        self.assertTrue(identity.is_admin)
        self.assertTrue(identity.is_scoped)

    def test_anonymous_is_unauthenticated(self):
        request = self.factory.get("/")
        request.user = AnonymousUser()
        with self.assertRaises(AuthenticationError):
            resolve_identity(request)

    def test_inactive_user_is_unauthenticated(self):
        user = make_user(is_active=False)
        request = self.factory.get("/")
        request.user = user
        with self.assertRaises(AuthenticationError):
            resolve_identity(request)

    def test_blank_location_becomes_none(self):
        user = make_user(User.Role.SUPER_ADMIN, "")
        identity = Identity.from_user(user)
        self.assertIsNone(identity.location_id)
        self.assertTrue(identity.is_super_admin)
        self.assertFalse(identity.is_scoped)
        identity.require_admin()

    def test_require_admin(self):
        with self.assertRaises(AuthorizationError):
            Identity(1, "u@example.org", User.Role.USER, "LOC-A").require_admin()
        Identity(1, "a@example.org", User.Role.ADMIN, "LOC-A").require_admin()
