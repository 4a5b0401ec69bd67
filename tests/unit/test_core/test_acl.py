"""Tests for ACL pattern evaluation."""

from __future__ import annotations

import pytest

from crm_service.core.acl import ACLChecker, AccessCheck, get_cached_access_check
from crm_service.core.schemas.auth import Actor


@pytest.mark.unit
class TestAccessCheck:
    """Tests for AccessCheck pattern matching."""

    def test_exact_grant(self) -> None:
        check = AccessCheck("7", ["crm.reminders.12.edit-delete"])

        assert check.matches_required_access("crm.reminders.12.edit-delete")
        assert not check.matches_required_access("crm.reminders.13.edit-delete")

    def test_star_matches_exactly_one_segment(self) -> None:
        check = AccessCheck("7", ["crm.tasks.*.delete"])

        assert check.matches_required_access("crm.tasks.9.delete")
        assert not check.matches_required_access("crm.tasks.9.sub.delete")

    def test_hash_matches_any_depth(self) -> None:
        check = AccessCheck("7", ["crm.#"])

        assert check.matches_required_access("crm.tasks.9.delete")
        assert check.matches_required_access("crm.reminders.create")
        assert not check.matches_required_access("billing.invoices.1.view")

    def test_negation_wins_over_grant(self) -> None:
        check = AccessCheck("7", ["crm.tasks.*.delete", "!crm.tasks.3.delete"])

        assert check.matches_required_access("crm.tasks.9.delete")
        assert not check.matches_required_access("crm.tasks.3.delete")
        assert check.is_denied("crm.tasks.3.delete")

    def test_me_matches_own_id(self) -> None:
        check = AccessCheck("7", ["crm.users.me.edit"])

        assert check.matches_required_access("crm.users.7.edit")
        assert not check.matches_required_access("crm.users.8.edit")

    def test_none_required_is_granted(self) -> None:
        assert AccessCheck(None, []).matches_required_access(None)

    def test_nothing_granted_by_default(self) -> None:
        assert not AccessCheck("7", []).matches_required_access("crm.tasks.1.view")

    def test_cached_checker_is_reused(self) -> None:
        first = get_cached_access_check("7", ["crm.#"])
        second = get_cached_access_check("7", ("crm.#",))

        assert first is second


@pytest.mark.unit
class TestACLChecker:
    """Tests for the per-actor ACL wrapper."""

    def test_has_any_acl(self) -> None:
        actor = Actor(user_id=4, acl=("crm.reminders.5.view",))
        checker = ACLChecker(actor)

        assert checker.has_any_acl("crm.reminders.4.view", "crm.reminders.5.view")
        assert not checker.has_any_acl("crm.reminders.4.view")

    def test_is_denied_only_for_negations(self) -> None:
        actor = Actor(user_id=3, role="client", acl=("!crm.reminders.create",))
        checker = ACLChecker(actor)

        assert checker.is_denied("crm.reminders.create")
        assert not checker.is_denied("crm.tasks.1.delete")
