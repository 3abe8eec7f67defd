from __future__ import annotations

from unittest import TestCase

from fittrack.errors import ValidationError
from fittrack.services.password_service import PasswordService


class PasswordServiceTests(TestCase):
    def setUp(self) -> None:
        self.service = PasswordService(rounds=4)

    def test_hash_is_salted_and_verifiable(self) -> None:
        first = self.service.hash("password123")
        second = self.service.hash("password123")

        self.assertNotEqual(first, second)
        self.assertNotIn("password123", first)
        self.assertTrue(self.service.verify("password123", first))
        self.assertTrue(self.service.verify("password123", second))
        self.assertFalse(self.service.verify("password124", first))

    def test_work_factor_is_encoded_in_digest(self) -> None:
        digest = PasswordService(rounds=5).hash("password123")

        self.assertEqual("05", digest.split("$")[2])

    def test_default_cost_factor_is_ten(self) -> None:
        self.assertEqual(10, PasswordService()._rounds)

    def test_malformed_hash_does_not_verify(self) -> None:
        self.assertFalse(self.service.verify("password123", "not-a-bcrypt-hash"))

    def test_password_over_bcrypt_limit_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.hash("x" * 73)

    def test_dummy_verification_never_succeeds(self) -> None:
        self.assertFalse(self.service.verify_dummy("password123"))
        self.assertFalse(self.service.verify_dummy(""))
