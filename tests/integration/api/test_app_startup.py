import pytest

from src.api.app import create_app
from src.app.verification import CodeHasher, VerificationPolicy
from config import ApplicationConfig


class StartupConfig(ApplicationConfig):
    OTP_SECRET = "startup-test-secret"


def test_app_refuses_to_start_without_otp_secret():
    class NoSecretConfig(StartupConfig):
        OTP_SECRET = ""

    with pytest.raises(ValueError, match="OTP_SECRET"):
        create_app(NoSecretConfig)


def test_app_state_is_built_from_config():
    class ShortCodes(StartupConfig):
        OTP_CODE_TTL_MINUTES = 5

    app = create_app(ShortCodes)

    assert isinstance(app.state.code_hasher, CodeHasher)
    assert isinstance(app.state.verification_policy, VerificationPolicy)
    assert app.state.verification_policy.code_ttl.total_seconds() == 300
    assert app.state.notification_dispatcher.timeout_seconds == ShortCodes.SMTP_TIMEOUT_SECONDS


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
