"""
Unit tests for the User aggregate: verification, reset, login eligibility and SSO.
"""

from datetime import timedelta

import pytest

from accounts.domain.exceptions import DomainInvariantError, ValidationError
from accounts.domain.models import EventCollector, User, UserRole
from accounts.domain.models.user import EMAIL_VERIFICATION_TTL, PASSWORD_RESET_TTL, tokens_match

ONE_MS = timedelta(milliseconds=1)


class TestRegistration:
    def test_register_sets_defaults(self, clock):
        events = EventCollector()
        user = User.register(" Jane@Example.com ", "Jane", clock=clock, events=events)

        assert user.email.value == "jane@example.com"
        assert user.role.value is UserRole.USER
        assert user.created_at == user.updated_at == clock.now
        assert not user.is_email_verified
        assert not user.has_password()
        assert [event.name for event in events] == ["user.registered"]

    @pytest.mark.parametrize("name", ["", "x" * 256])
    def test_name_length_is_enforced(self, clock, name):
        with pytest.raises(ValidationError):
            User.register("jane@example.com", name, clock=clock)

    def test_token_and_expiry_must_be_set_together(self, clock):
        with pytest.raises(ValidationError):
            User(
                id="6f1c1d1e-0000-4000-8000-000000000000",
                email="jane@example.com",
                name="Jane",
                role="ROLE_USER",
                created_at=clock.now,
                updated_at=clock.now,
                email_verification_token="abc",
            )


class TestEmailVerification:
    """Verification token lifecycle and its 24 hour expiry."""

    def test_initiate_issues_256_bit_hex_token(self, make_user, clock):
        user = make_user(verified=False)
        clock.advance(timedelta(minutes=5))
        token = user.initiate_email_verification()

        assert len(token) == 64
        int(token, 16)
        assert user.email_verification_expiry == clock.now + EMAIL_VERIFICATION_TTL
        assert user.updated_at == clock.now

    def test_verify_with_matching_token(self, make_user):
        user = make_user(verified=False)
        token = user.initiate_email_verification()
        events = EventCollector()

        assert user.verify_email(token, events=events)
        assert user.is_email_verified
        assert user.email_verification_token is None
        assert user.email_verification_expiry is None
        assert [event.name for event in events] == ["user.email_verified"]

    def test_second_verification_with_same_token_fails(self, make_user):
        user = make_user(verified=False)
        token = user.initiate_email_verification()

        assert user.verify_email(token)
        assert not user.verify_email(token)

    def test_wrong_token_leaves_state_untouched(self, make_user):
        user = make_user(verified=False)
        token = user.initiate_email_verification()
        before = user.updated_at

        assert not user.verify_email("0" * 64)
        assert not user.verify_email(token[:-1])
        assert not user.is_email_verified
        assert user.email_verification_token == token
        assert user.updated_at == before

    def test_no_pending_token_fails_closed(self, make_user):
        user = make_user(verified=False)
        assert not user.verify_email("anything")

    def test_accepted_just_before_expiry(self, make_user, clock):
        user = make_user(verified=False)
        token = user.initiate_email_verification()
        clock.advance(EMAIL_VERIFICATION_TTL - ONE_MS)

        assert user.verify_email(token)

    def test_rejected_just_after_expiry(self, make_user, clock):
        user = make_user(verified=False)
        token = user.initiate_email_verification()
        clock.advance(EMAIL_VERIFICATION_TTL + ONE_MS)

        assert not user.verify_email(token)
        assert not user.is_email_verified

    def test_reissue_replaces_previous_token(self, make_user):
        user = make_user(verified=False)
        first = user.initiate_email_verification()
        second = user.initiate_email_verification()

        assert first != second
        assert not user.verify_email(first)
        assert user.verify_email(second)

    def test_mark_email_as_verified_clears_token(self, make_user):
        user = make_user(verified=False)
        user.initiate_email_verification()
        user.mark_email_as_verified()

        assert user.is_email_verified
        assert user.email_verification_token is None

    def test_changing_email_requires_reverification(self, make_user):
        user = make_user()
        user.update_email("New@Example.com")
        assert user.email.value == "new@example.com"
        assert not user.is_email_verified

    def test_same_email_keeps_verification(self, make_user):
        user = make_user()
        user.update_email("JANE@example.com")
        assert user.is_email_verified


class TestTokenComparison:
    def test_matching(self):
        assert tokens_match("abc", "abc")

    def test_mismatch_and_non_string(self):
        assert not tokens_match("abc", "abd")
        assert not tokens_match("abc", None)
        assert not tokens_match("abc", 123)


class TestPasswordReset:
    """Reset token lifecycle and its 1 hour expiry."""

    def test_reset_with_valid_token(self, make_user):
        user = make_user()
        token = user.initiate_password_reset()
        events = EventCollector()

        assert user.reset_password(token, "N3w!Password", events=events)
        assert user.verify_password("N3w!Password")
        assert user.password_reset_token is None
        assert user.password_reset_expiry is None
        assert "user.password_changed" in [event.name for event in events]

    def test_reset_accepted_just_before_expiry(self, make_user, clock):
        user = make_user()
        token = user.initiate_password_reset()
        clock.advance(PASSWORD_RESET_TTL - ONE_MS)

        assert user.reset_password(token, "NewPass1!")
        assert user.verify_password("NewPass1!")

    def test_stale_token_leaves_hash_unchanged(self, make_user, clock):
        user = make_user()
        token = user.initiate_password_reset()
        original_hash = user.password_hash
        clock.advance(PASSWORD_RESET_TTL + ONE_MS)

        assert not user.reset_password(token, "NewPass1!")
        assert user.password_hash == original_hash

    def test_weak_password_propagates_and_keeps_token(self, make_user):
        user = make_user()
        token = user.initiate_password_reset()

        with pytest.raises(ValidationError):
            user.reset_password(token, "weak")
        assert user.password_reset_token == token

    def test_wrong_token(self, make_user):
        user = make_user()
        user.initiate_password_reset()
        assert not user.reset_password("f" * 64, "N3w!Password")

    def test_clear_password_reset_token(self, make_user):
        user = make_user()
        token = user.initiate_password_reset()
        user.clear_password_reset_token()

        assert user.password_reset_token is None
        assert not user.reset_password(token, "N3w!Password")


class TestLoginEligibility:
    def test_new_user_can_login_only_after_verification(self, clock):
        user = User.register("jane@example.com", "Jane", is_email_verified=False, is_active=True, clock=clock)
        user.set_password("Str0ng!Pass")
        token = user.initiate_email_verification()

        assert not user.can_login()
        assert user.verify_email(token)
        assert user.can_login()

    def test_google_link_satisfies_verification(self, clock):
        user = User.register("jane@example.com", "Jane", clock=clock)
        legacy = User.from_primitives({**user.to_primitives(), "google_id": "g-123", "is_email_verified": False})

        assert legacy.is_active and not legacy.is_email_verified
        assert legacy.can_login()

    def test_inactive_user_cannot_login(self, make_user):
        user = make_user(active=False)
        assert not user.can_login()

    def test_record_login(self, make_user, clock):
        user = make_user()
        clock.advance(timedelta(hours=1))
        events = EventCollector()
        user.record_login(events=events)

        assert user.last_login_at == clock.now
        assert [event.name for event in events] == ["user.logged_in"]

    def test_verify_password_without_hash(self, make_user):
        user = make_user(password="")
        assert not user.verify_password("Str0ng!Pass")


class TestGoogleAccount:
    def test_link_marks_email_verified(self, make_user):
        user = make_user(verified=False)
        user.link_google_account("g-123", "https://example.com/a.png")

        assert user.google_id == "g-123"
        assert user.avatar_url == "https://example.com/a.png"
        assert user.is_email_verified
        assert user.uses_google_sso()

    def test_link_requires_id(self, make_user):
        with pytest.raises(ValidationError):
            make_user().link_google_account("")

    def test_unlink_without_password_fails(self, make_user):
        user = make_user(password="")
        user.link_google_account("g-123")

        with pytest.raises(DomainInvariantError):
            user.unlink_google_account()
        assert user.google_id == "g-123"

    def test_unlink_with_password_clears_link(self, make_user):
        user = make_user()
        user.link_google_account("g-123")
        user.unlink_google_account()

        assert user.google_id is None
        assert not user.uses_google_sso()


class TestLifecycle:
    def test_mutations_bump_updated_at(self, make_user, clock):
        user = make_user()
        created_at = user.created_at
        user_id = user.id

        for mutate in (
            lambda: user.update_name("Janet"),
            lambda: user.update_role(UserRole.ADMIN),
            lambda: user.deactivate(),
            lambda: user.activate(),
            lambda: user.update_avatar_url("https://example.com/b.png"),
        ):
            clock.advance(timedelta(seconds=1))
            mutate()
            assert user.updated_at == clock.now

        assert user.created_at == created_at
        assert user.id == user_id

    def test_role_change_event_carries_both_roles(self, make_user):
        user = make_user()
        events = EventCollector()
        user.update_role("ROLE_ADMIN", events=events)

        (event,) = events.drain()
        assert event.old_role == "ROLE_USER"
        assert event.new_role == "ROLE_ADMIN"
        assert len(events) == 0

    def test_primitives_round_trip(self, make_user, clock):
        user = make_user()
        user.initiate_password_reset()
        copy = User.from_primitives(user.to_primitives(), clock=clock)

        assert copy == user
        assert copy.to_primitives() == user.to_primitives()
