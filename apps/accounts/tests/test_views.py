import json

from django.test import TestCase
from django.urls import reverse

from apps.accounts.models import User


class AuthViewTests(TestCase):
    def setUp(self):
        self.nurse = User.objects.create_user(email="nurse@hospital.com", password="pass123", name="Nina Nurse")

    def _post(self, url_name, payload):
        return self.client.post(reverse(url_name), data=json.dumps(payload), content_type="application/json")

    def test_login_and_me(self):
        response = self._post("accounts:login", {"email": "nurse@hospital.com", "password": "pass123"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role"], "nurse")

        me = self.client.get(reverse("accounts:me"))
        self.assertEqual(me.json()["email"], "nurse@hospital.com")

    def test_bad_credentials(self):
        response = self._post("accounts:login", {"email": "nurse@hospital.com", "password": "wrong"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "invalid_credentials")

    def test_inactive_account_cannot_login(self):
        self.nurse.is_active = False
        self.nurse.save()
        response = self._post("accounts:login", {"email": "nurse@hospital.com", "password": "pass123"})
        self.assertEqual(response.status_code, 401)

    def test_missing_fields(self):
        response = self._post("accounts:login", {"email": "nurse@hospital.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "validation_error")

    def test_non_text_fields(self):
        response = self._post("accounts:login", {"email": 5, "password": ["pass123"]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "validation_error")

    def test_me_requires_login(self):
        response = self.client.get(reverse("accounts:me"))
        self.assertEqual(response.status_code, 401)

    def test_logout(self):
        self.client.force_login(self.nurse)
        self.assertEqual(self.client.post(reverse("accounts:logout")).status_code, 204)
        self.assertEqual(self.client.get(reverse("accounts:me")).status_code, 401)


class StaffDirectoryTests(TestCase):
    def setUp(self):
        self.head = User.objects.create_user(
            email="head@hospital.com", password="pass123", name="Hana Head", role=User.Role.HEAD_NURSE
        )
        self.client.force_login(self.head)

    def _register(self, payload):
        return self.client.post(reverse("accounts:register"), data=json.dumps(payload), content_type="application/json")

    def test_register_nurse(self):
        response = self._register({"name": "New Nurse", "email": "new@hospital.com", "password": "Zx9!ward-roster"})
        self.assertEqual(response.status_code, 201)
        user = User.objects.get(email="new@hospital.com")
        self.assertEqual(user.role, User.Role.NURSE)
        self.assertTrue(user.check_password("Zx9!ward-roster"))

    def test_register_duplicate_email(self):
        response = self._register({"name": "Dup", "email": "head@hospital.com", "password": "Zx9!ward-roster"})
        self.assertEqual(response.status_code, 409)

    def test_register_validates_role_and_password(self):
        bad_role = self._register({"name": "X", "email": "x@hospital.com", "password": "Zx9!ward-roster", "role": "doctor"})
        self.assertEqual(bad_role.status_code, 400)
        weak = self._register({"name": "Y", "email": "y@hospital.com", "password": "123"})
        self.assertEqual(weak.status_code, 400)

    def test_nurses_cannot_register_users(self):
        nurse = User.objects.create_user(email="n@hospital.com", password="pass123", name="N")
        self.client.force_login(nurse)
        response = self._register({"name": "Z", "email": "z@hospital.com", "password": "Zx9!ward-roster"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "forbidden")

    def test_user_list_filters(self):
        User.objects.create_user(email="a@hospital.com", password="p", name="Amy", role=User.Role.NURSE)
        User.objects.create_user(email="b@hospital.com", password="p", name="Ben", is_active=False)
        response = self.client.get(reverse("accounts:users"), {"role": "nurse", "active": "true"})
        self.assertEqual([u["name"] for u in response.json()["users"]], ["Amy"])
