from __future__ import annotations

from types import SimpleNamespace

import pytest

from event_planner.auth.ownership import (
    validate_badge_ownership,
    validate_event_ownership,
    validate_label_ownership,
    validate_recurring_event_ownership,
    validate_user_ownership,
)
from event_planner.core.errors import (
    BadgeOwnershipError,
    EventOwnershipError,
    LabelOwnershipError,
    RecurringEventOwnershipError,
    UserOwnershipError,
)

CASES = [
    (validate_event_ownership, EventOwnershipError, "UNAUTHORIZED_EVENT_ACCESS"),
    (validate_recurring_event_ownership, RecurringEventOwnershipError, "UNAUTHORIZED_RECURRING_EVENT_ACCESS"),
    (validate_label_ownership, LabelOwnershipError, "UNAUTHORIZED_LABEL_ACCESS"),
    (validate_badge_ownership, BadgeOwnershipError, "UNAUTHORIZED_BADGE_ACCESS"),
]


@pytest.mark.parametrize("validate,error_cls,code", CASES)
def test_creator_passes(validate, error_cls, code):
    validate(7, SimpleNamespace(id=1, creator_id=7))


@pytest.mark.parametrize("validate,error_cls,code", CASES)
def test_non_creator_is_denied_with_resource_code(validate, error_cls, code):
    with pytest.raises(error_cls) as exc:
        validate(8, SimpleNamespace(id=1, creator_id=7))
    assert exc.value.status_code == 403
    assert exc.value.code == code
    assert exc.value.resource_id == 1


def test_user_ownership():
    validate_user_ownership(3, 3)
    with pytest.raises(UserOwnershipError) as exc:
        validate_user_ownership(3, 4)
    assert exc.value.code == "UNAUTHORIZED_USER_ACCESS"
    assert exc.value.resource_id == 4
