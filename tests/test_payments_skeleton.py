import pytest


def test_factory_returns_paynow_client():
    from application.ports.payment_gateway import PaymentGateway
    from infrastructure.external.payments import get_payment_gateway
    from infrastructure.external.payments.paynow_client import PaynowClient

    gw = get_payment_gateway()
    assert isinstance(gw, PaynowClient)
    assert isinstance(gw, PaymentGateway)
    assert gw.provider == "paynow"


def test_factory_rejects_unknown_provider():
    from infrastructure.external.payments import get_payment_gateway

    with pytest.raises(ValueError):
        get_payment_gateway("stripe")


def test_settings_from_env(monkeypatch):
    from core.settings import DEFAULT_INITIATE_URL, PaynowSettings

    monkeypatch.setenv("PAYNOW_INTEGRATION_ID", "999")
    monkeypatch.setenv("PAYNOW_TIMEOUTS__READ", "2.5")
    monkeypatch.setenv("PAYNOW_POLL__MAX_ATTEMPTS", "3")
    s = PaynowSettings()
    assert s.integration_id == "999"
    assert s.timeouts.read == 2.5
    assert s.poll.max_attempts == 3
    assert s.initiate_url == DEFAULT_INITIATE_URL
    assert "test-integration-key" not in repr(s)
    assert s.integration_key.get_secret_value() == "test-integration-key"


@pytest.mark.parametrize("provider", ["ecocash", "onemoney", ""])
def test_factory_accepts_only_paynow(provider):
    from infrastructure.external.payments import get_payment_gateway
    from infrastructure.external.payments.paynow_client import PaynowClient

    if provider:
        with pytest.raises(ValueError, match="Unsupported payment provider"):
            get_payment_gateway(provider)
    else:
        assert isinstance(get_payment_gateway(provider), PaynowClient)
    assert isinstance(get_payment_gateway("PayNow"), PaynowClient)


def test_business_codes():
    from domain.common.exceptions import DomainValidationException
    from shared.codes import BusinessCode
    from shared.codes.payment_codes import PaymentCode

    assert [m.name for m in BusinessCode] == ["PARAM_VALIDATION_ERROR"]
    assert 0 not in {m.value for m in PaymentCode}

    exc = DomainValidationException("amount must be positive", field="amount")
    assert exc.code == BusinessCode.PARAM_VALIDATION_ERROR == 10003
    assert exc.error_type == "DomainValidationError"
    assert exc.field == "amount"
    assert str(exc) == "amount must be positive"
    assert not hasattr(exc, "message_key")
