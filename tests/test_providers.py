"""Unit tests for provider selection and the email transports."""

from __future__ import annotations

import json
import types

import pytest
from pydantic import ValidationError

from app.config import Settings
from app.domain.entities import EmailStatus
from app.infrastructure.email import (
    AWSCredentials,
    DeliveryProviderChain,
    EmailProviderConfig,
    SMTPCredentials,
    SimulatedTransportFactory,
    TemplateRenderer,
    transport_factory_for,
)
from app.infrastructure.email import transports as transports_module

ALL_PROVIDERS = EmailProviderConfig(
    from_email="noreply@connectone.com",
    sendgrid_api_key="SG.fake",
    aws_credentials=AWSCredentials("AKIAFAKE", "secret", "ap-northeast-2"),
    smtp_credentials=SMTPCredentials("mailer@example.com", "app-password"),
)


def _chain(config: EmailProviderConfig, factory) -> DeliveryProviderChain:
    return DeliveryProviderChain(config, TemplateRenderer("https://connectone.test"), factory)


def test_sendgrid_wins_when_every_provider_is_configured(
    recording_factory, email_factory
) -> None:
    factory = recording_factory()
    chain = _chain(ALL_PROVIDERS, factory)
    email = email_factory()

    assert chain.send(email) is True

    assert list(factory.transports) == ["sendgrid"]
    assert len(factory.transports["sendgrid"].sent) == 1
    assert factory.transports["sendgrid"].sent[0].subject == email.title
    assert email.status is EmailStatus.COMPLETED


def test_failed_provider_does_not_fall_through_to_the_next(
    recording_factory, email_factory
) -> None:
    factory = recording_factory(fail=True)
    chain = _chain(ALL_PROVIDERS, factory)
    email = email_factory()

    assert chain.send(email) is False

    assert "ses" not in factory.transports
    assert "smtp" not in factory.transports
    assert email.status is EmailStatus.FAILED


@pytest.mark.parametrize(
    ("config", "expected"),
    [
        (
            EmailProviderConfig(
                aws_credentials=AWSCredentials("AKIAFAKE", "secret"),
                smtp_credentials=SMTPCredentials("mailer@example.com", "pw"),
            ),
            "ses",
        ),
        (EmailProviderConfig(smtp_credentials=SMTPCredentials("mailer@example.com", "pw")), "smtp"),
        (EmailProviderConfig(), "fallback"),
    ],
)
def test_provider_order_without_sendgrid(config, expected, recording_factory, email_factory) -> None:
    factory = recording_factory()
    chain = _chain(config, factory)

    assert chain.provider_name == expected
    assert chain.send(email_factory()) is True
    assert list(factory.transports) == [expected]


def test_transport_is_built_once_per_chain(recording_factory, email_factory) -> None:
    factory = recording_factory()
    chain = _chain(EmailProviderConfig(), factory)

    chain.send(email_factory(id="email_1"))
    chain.send(email_factory(id="email_2"))

    assert len(factory.transports["fallback"].sent) == 2


def test_send_batch_counts_each_email(recording_factory, email_factory) -> None:
    chain = _chain(EmailProviderConfig(), recording_factory())

    result = chain.send_batch([email_factory(id="email_1"), email_factory(id="email_2")])

    assert result.success == 2
    assert result.failed == 0
    assert [item["id"] for item in result.results] == ["email_1", "email_2"]


def test_config_from_settings_reads_provider_credentials() -> None:
    settings = Settings(
        _env_file=None,
        database_url="sqlite://",
        aws_access_key_id="AKIAFAKE",
        aws_secret_access_key="secret",
        aws_region="ap-northeast-2",
        smtp_username="mailer@example.com",
        smtp_password="pw",
    )

    config = EmailProviderConfig.from_settings(settings)

    assert config.selected_provider() == "ses"
    assert config.aws_credentials == AWSCredentials("AKIAFAKE", "secret", "ap-northeast-2")
    assert config.smtp_credentials.host == "smtp.gmail.com"


def test_settings_reject_half_configured_credentials() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="sqlite://", aws_access_key_id="AKIAFAKE")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="sqlite://", smtp_password="pw")


def test_non_server_context_simulates_every_provider(monkeypatch, email_factory) -> None:
    class ExplodingClient:
        def __init__(self, api_key):
            raise AssertionError("SendGrid must not be contacted")

    monkeypatch.setattr(transports_module, "SendGridAPIClient", ExplodingClient)
    factory = transport_factory_for(False)
    chain = _chain(ALL_PROVIDERS, factory)

    assert isinstance(factory, SimulatedTransportFactory)
    assert chain.send(email_factory()) is True


def test_sendgrid_transport_sends_rendered_message(monkeypatch, email_factory) -> None:
    captured = {}

    class SuccessfulClient:
        def __init__(self, api_key):
            captured["api_key"] = api_key

        def send(self, message):
            captured["message"] = message
            return types.SimpleNamespace(status_code=202, body=None)

    monkeypatch.setattr(transports_module, "SendGridAPIClient", SuccessfulClient)
    chain = _chain(EmailProviderConfig(sendgrid_api_key="SG.fake"), transport_factory_for(True))

    assert chain.send(email_factory()) is True
    assert captured["api_key"] == "SG.fake"
    assert captured["message"] is not None


def test_sendgrid_forbidden_error_is_logged_with_details(
    monkeypatch, caplog, email_factory
) -> None:
    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {
                "errors": [
                    {
                        "message": "The provided authorization grant is invalid.",
                        "help": "https://sendgrid.com/docs/for-developers/sending-email/authentication/",
                    }
                ]
            }
        ).encode()

    class FailingClient:
        def __init__(self, api_key):
            self.api_key = api_key

        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(transports_module, "SendGridAPIClient", FailingClient)
    chain = _chain(EmailProviderConfig(sendgrid_api_key="SG.fake"), transport_factory_for(True))

    with caplog.at_level("ERROR"):
        result = chain.send(email_factory())

    assert result is False
    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


def test_sendgrid_non_success_status_fails(monkeypatch, email_factory) -> None:
    class RejectingClient:
        def __init__(self, api_key):
            pass

        def send(self, message):
            return types.SimpleNamespace(status_code=500, body=b"")

    monkeypatch.setattr(transports_module, "SendGridAPIClient", RejectingClient)
    chain = _chain(EmailProviderConfig(sendgrid_api_key="SG.fake"), transport_factory_for(True))

    assert chain.send(email_factory()) is False


def test_ses_transport_uses_configured_region(monkeypatch, email_factory) -> None:
    calls = {}

    class FakeSESClient:
        def send_email(self, **kwargs):
            calls["send"] = kwargs
            return {"MessageId": "ses-1"}

    def fake_client(service, **kwargs):
        calls["client"] = (service, kwargs)
        return FakeSESClient()

    monkeypatch.setattr(transports_module, "boto3", types.SimpleNamespace(client=fake_client))
    config = EmailProviderConfig(
        aws_credentials=AWSCredentials("AKIAFAKE", "secret", "ap-northeast-2")
    )
    email = email_factory()

    assert _chain(config, transport_factory_for(True)).send(email) is True

    service, kwargs = calls["client"]
    assert service == "ses"
    assert kwargs["region_name"] == "ap-northeast-2"
    assert calls["send"]["Destination"] == {"ToAddresses": [email.user_id]}
    assert calls["send"]["Message"]["Subject"]["Data"] == email.title
    assert "ConnecTone" in calls["send"]["Source"]


def test_smtp_transport_logs_in_and_sends(monkeypatch, email_factory) -> None:
    events = []

    class FakeSMTP:
        def __init__(self, host, port, **kwargs):
            events.append(("connect", host, port))

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return False

        def starttls(self):
            events.append(("starttls",))

        def login(self, username, password):
            events.append(("login", username))

        def sendmail(self, sender, recipients, body):
            events.append(("sendmail", sender, tuple(recipients)))

    monkeypatch.setattr(transports_module.smtplib, "SMTP", FakeSMTP)
    config = EmailProviderConfig(
        smtp_credentials=SMTPCredentials("mailer@example.com", "pw", "smtp.example.com", 2525)
    )

    assert _chain(config, transport_factory_for(True)).send(email_factory()) is True
    assert events == [
        ("connect", "smtp.example.com", 2525),
        ("starttls",),
        ("login", "mailer@example.com"),
        ("sendmail", "mailer@example.com", ("buyer@example.com",)),
    ]
