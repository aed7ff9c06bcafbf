import pytest

from app.flow.states import (
    PhoneState,
    SubscriptionEvent,
    SubscriptionRecord,
    is_valid_transition,
    state_of,
)


def test_record_constructors():
    assert SubscriptionRecord.unset("U").phone_number is None
    assert SubscriptionRecord.pending("U", "+1").state == PhoneState.PENDING
    assert SubscriptionRecord.confirmed("U", "+1").is_confirmed


@pytest.mark.parametrize("state, phone", [
    (PhoneState.UNSET, "+1"),
    (PhoneState.PENDING, None),
    (PhoneState.CONFIRMED, ""),
])
def test_record_rejects_inconsistent_phone(state, phone):
    with pytest.raises(ValueError):
        SubscriptionRecord(user_id="U", state=state, phone_number=phone)


def test_state_of_missing_record_is_unset():
    assert state_of(None) == PhoneState.UNSET
    assert state_of(SubscriptionRecord.pending("U", "+1")) == PhoneState.PENDING


@pytest.mark.parametrize("event, from_state, to_state, allowed", [
    (SubscriptionEvent.SUBSCRIBE, PhoneState.UNSET, PhoneState.PENDING, True),
    (SubscriptionEvent.SUBSCRIBE, PhoneState.CONFIRMED, PhoneState.PENDING, True),
    (SubscriptionEvent.SUBSCRIBE, PhoneState.UNSET, PhoneState.CONFIRMED, False),
    (SubscriptionEvent.CONFIRM, PhoneState.PENDING, PhoneState.CONFIRMED, True),
    (SubscriptionEvent.CONFIRM, PhoneState.UNSET, PhoneState.CONFIRMED, False),
    (SubscriptionEvent.CONFIRM, PhoneState.CONFIRMED, PhoneState.CONFIRMED, False),
    (SubscriptionEvent.UNSUBSCRIBE, PhoneState.PENDING, PhoneState.UNSET, True),
    (SubscriptionEvent.UNSUBSCRIBE, PhoneState.CONFIRMED, PhoneState.UNSET, True),
    (SubscriptionEvent.UNSUBSCRIBE, PhoneState.UNSET, PhoneState.UNSET, False),
])
def test_transitions(event, from_state, to_state, allowed):
    assert is_valid_transition(event, from_state, to_state) is allowed
