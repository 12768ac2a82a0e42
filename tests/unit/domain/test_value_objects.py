"""Unit tests for domain value objects."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from user_registry.domain.exceptions import (
    ArgumentNotProvidedException,
    InvalidEmailError,
    InvalidPasswordError,
)
from user_registry.domain.value_objects import Email, HashedPassword


class TestEmail:
    def test_valid_email(self):
        email = Email(value="john@gmail.com")
        assert email.value == "john@gmail.com"
        assert email.domain == "gmail.com"
        assert email.local_part == "john"
        assert str(email) == "john@gmail.com"

    def test_is_domain_primitive(self):
        email = Email(value="john@gmail.com")
        assert email.is_domain_primitive
        assert email.unpack() == "john@gmail.com"

    def test_structural_equality(self):
        assert Email(value="a@example.com").equals(Email(value="a@example.com"))
        assert Email(value="a@example.com") == Email(value="a@example.com")
        assert Email(value="a@example.com") != Email(value="b@example.com")
        assert hash(Email(value="a@example.com")) == hash(Email(value="a@example.com"))

    def test_equals_none_is_false(self):
        assert Email(value="a@example.com").equals(None) is False

    def test_different_types_with_same_props_are_not_equal(self):
        assert not Email(value="a@example.com").equals(HashedPassword(value="a@example.com"))

    def test_invalid_email_raises(self):
        with pytest.raises(InvalidEmailError) as exc_info:
            Email(value="not-an-email")
        assert exc_info.value.code == "INVALID_EMAIL"
        assert exc_info.value.metadata["email"] == "not-an-email"

    @pytest.mark.parametrize("address", ["o'brien@example.com", "josé@example.com", "first.last+tag@sub.example.co"])
    def test_accepts_addresses_email_str_accepts(self, address):
        assert Email(value=address).value == address

    def test_missing_domain_dot_raises(self):
        with pytest.raises(InvalidEmailError):
            Email(value="john@localhost")

    def test_too_long_email_raises(self):
        with pytest.raises(InvalidEmailError):
            Email(value="a" * 320 + "@example.com")

    def test_empty_email_raises(self):
        with pytest.raises(ArgumentNotProvidedException):
            Email(value="")

    def test_immutable(self):
        email = Email(value="john@gmail.com")
        with pytest.raises(ValidationError):
            email.value = "other@gmail.com"


class TestHashedPassword:
    def test_from_plain_hashes_and_verifies(self):
        hashed = HashedPassword.from_plain("wUN3B%AM7oV9AO", rounds=4)
        assert hashed.value != "wUN3B%AM7oV9AO"
        assert hashed.value.startswith("$2b$04$")
        assert hashed.verify("wUN3B%AM7oV9AO")
        assert not hashed.verify("wrong")

    def test_default_rounds(self):
        hashed = HashedPassword.from_plain("abcd")
        assert hashed.value.startswith("$2b$10$")

    def test_too_short_raises(self):
        with pytest.raises(InvalidPasswordError) as exc_info:
            HashedPassword.from_plain("abc", rounds=4)
        assert exc_info.value.violations == ["minimum 4 characters"]

    def test_long_password_round_trips(self):
        plain = "a" * 80
        hashed = HashedPassword.from_plain(plain, rounds=4)
        assert hashed.verify(plain)
        assert not hashed.verify("b" * 80)

    def test_multibyte_password_over_72_bytes_round_trips(self):
        plain = "é" * 40
        hashed = HashedPassword.from_plain(plain, rounds=4)
        assert hashed.verify(plain)

    def test_only_first_72_bytes_are_significant(self):
        hashed = HashedPassword.from_plain("a" * 72 + "tail-one", rounds=4)
        assert hashed.verify("a" * 72 + "tail-two")

    def test_verify_against_garbage_hash_is_false(self):
        assert HashedPassword.from_hash("not-a-bcrypt-hash").verify("anything") is False

    def test_never_renders_hash(self):
        hashed = HashedPassword.from_plain("abcd", rounds=4)
        assert hashed.value not in str(hashed)
        assert hashed.value not in repr(hashed)
