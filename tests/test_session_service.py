"""
Tests for the session service: startup restore, sign-in state, periodic
validation and recovery when the client returns to the foreground.
"""

import anyio
import pytest

from app.exceptions import BackendError
from domain.enums import SessionState, UserRole
from domain.schemas.profile_schemas import ProfileUpdate
from test_fixtures import make_services, signed_in_services

pytestmark = pytest.mark.anyio


# =============================================================================
# STARTUP
# =============================================================================


async def test_initialize_without_stored_session_is_anonymous(backend):
    services = make_services(backend)

    await services.session.initialize()

    assert services.session.state == SessionState.ANONYMOUS
    assert services.session.is_ready
    assert backend.calls == []


async def test_wait_until_ready_blocks_until_initialized(backend):
    services = make_services(backend)
    results = []

    async def waiter():
        results.append(await services.session.wait_until_ready(timeout=2))

    async with anyio.create_task_group() as tg:
        tg.start_soon(waiter)
        await anyio.sleep(0.01)
        assert results == []
        await services.session.initialize()

    assert results == [True]


async def test_wait_until_ready_times_out(backend):
    services = make_services(backend)
    assert await services.session.wait_until_ready(timeout=0.05) is False


async def test_persisted_session_is_restored(backend, tmp_path):
    session_file = str(tmp_path / "session.json")
    first = await signed_in_services(backend, session_file=session_file)
    user_id = first.session.current_user_id

    second = make_services(backend, session_file=session_file)
    await second.session.initialize()

    assert second.session.is_authenticated
    assert second.session.current_user_id == user_id
    assert second.session.current_profile.display_name == "Test User"


async def test_expired_access_token_is_refreshed_on_startup(backend, tmp_path):
    session_file = str(tmp_path / "session.json")
    await signed_in_services(backend, session_file=session_file)
    backend.access_tokens.clear()

    services = make_services(backend, session_file=session_file)
    await services.session.initialize()

    assert services.session.is_authenticated
    assert backend.calls_to("POST", "/auth/v1/token") == 2


async def test_revoked_session_is_discarded_on_startup(backend, tmp_path):
    session_file = str(tmp_path / "session.json")
    await signed_in_services(backend, session_file=session_file)
    backend.revoke_all_tokens()

    services = make_services(backend, session_file=session_file)
    await services.session.initialize()

    assert services.session.state == SessionState.ANONYMOUS
    assert services.store.session is None
    assert not (tmp_path / "session.json").exists()


async def test_unreachable_backend_on_startup_raises_for_retry(backend, tmp_path):
    session_file = str(tmp_path / "session.json")
    await signed_in_services(backend, session_file=session_file)
    backend.fail("GET", "/auth/v1/user", network=True, times=2)

    services = make_services(backend, session_file=session_file)
    with pytest.raises(BackendError):
        await services.session.initialize()
    assert not services.session.is_ready

    services.session.mark_anonymous()
    assert services.session.is_ready
    assert services.session.state == SessionState.ANONYMOUS


async def test_unreachable_refresh_on_startup_keeps_stored_session(backend, tmp_path):
    session_file = str(tmp_path / "session.json")
    await signed_in_services(backend, session_file=session_file)
    backend.access_tokens.clear()
    backend.fail("POST", "/auth/v1/token", status=503, times=2)

    services = make_services(backend, session_file=session_file)
    with pytest.raises(BackendError):
        await services.session.initialize()

    assert services.store.session is not None
    assert (tmp_path / "session.json").exists()


# =============================================================================
# SIGN IN / OUT
# =============================================================================


async def test_sign_in_loads_profile_and_role(backend):
    backend.add_user("admin@example.com", role="admin")
    services = await signed_in_services(backend, email="admin@example.com")

    status = services.session.status()
    assert status.state == SessionState.AUTHENTICATED
    assert status.profile.role == UserRole.ADMIN
    assert status.is_admin


async def test_failed_sign_in_stays_anonymous(backend):
    backend.add_user("cook@example.com")
    services = make_services(backend)
    await services.session.initialize()

    result = await services.session.sign_in("cook@example.com", "wrong-password")

    assert not result.success
    assert result.error == "Invalid login credentials"
    assert services.session.state == SessionState.ANONYMOUS


async def test_profile_failure_keeps_user_signed_in(backend):
    backend.add_user("cook@example.com")
    backend.fail("GET", "/rest/v1/profiles", status=500, times=2)

    services = await signed_in_services(backend)

    assert services.session.is_authenticated
    assert services.session.current_profile is None
    assert not services.session.is_admin


async def test_sign_out_clears_state_and_revokes_token(backend):
    services = await signed_in_services(backend)
    token = services.store.access_token()

    result = await services.session.sign_out()

    assert result.success
    assert services.session.state == SessionState.ANONYMOUS
    assert services.store.session is None
    assert token not in backend.access_tokens


async def test_sign_up_with_and_without_confirmation(backend):
    services = make_services(backend)
    await services.session.initialize()

    confirmed = await services.session.sign_up("new@example.com", "secret123", "Нова")
    assert confirmed.success
    assert confirmed.data["confirmation_required"] is False
    assert services.session.is_authenticated

    await services.session.sign_out()
    backend.auto_confirm = False
    pending = await services.session.sign_up("later@example.com", "secret123", "Later")
    assert pending.data["confirmation_required"] is True
    assert not services.session.is_authenticated

    duplicate = await services.session.sign_up("new@example.com", "secret123", "Again")
    assert not duplicate.success
    assert duplicate.error == "User already registered"


async def test_oauth_url_uses_configured_provider(backend):
    services = make_services(backend, oauth_redirect_url="http://app.test/callback")

    url = services.session.oauth_url()

    assert url == (
        "http://backend.test/auth/v1/authorize?provider=google"
        "&redirect_to=http%3A%2F%2Fapp.test%2Fcallback"
    )


# =============================================================================
# PROFILE
# =============================================================================


async def test_update_profile_refreshes_current_profile(backend):
    services = await signed_in_services(backend)

    result = await services.session.update_profile(ProfileUpdate(display_name="  Мария  "))

    assert result.success
    assert services.session.current_profile.display_name == "Мария"


async def test_upload_avatar_sets_public_url(backend):
    services = await signed_in_services(backend)
    user_id = services.session.current_user_id

    result = await services.session.upload_avatar("me.PNG", b"\x89PNG", "image/png")

    assert result.success, result.error
    url = services.session.current_profile.avatar_url
    assert url.startswith(f"http://backend.test/storage/v1/object/public/avatars/{user_id}/")
    assert url.endswith(".png")


async def test_profile_changes_require_sign_in(backend):
    services = make_services(backend)
    await services.session.initialize()

    result = await services.session.update_profile(ProfileUpdate(display_name="x"))

    assert not result.success
    assert result.http_status == 401


# =============================================================================
# KEEPING THE SESSION FRESH
# =============================================================================


async def test_validate_session_signs_out_when_invalid(backend):
    services = await signed_in_services(backend)
    backend.revoke_all_tokens()

    assert await services.session.validate_session() is False
    assert services.session.state == SessionState.ANONYMOUS
    assert services.store.session is None


async def test_validate_session_refreshes_rejected_token(backend):
    services = await signed_in_services(backend)
    backend.access_tokens.clear()

    assert await services.session.validate_session() is True
    assert services.session.is_authenticated


async def test_validate_session_tolerates_network_failure(backend):
    services = await signed_in_services(backend)
    backend.fail("GET", "/auth/v1/user", status=503, times=2)

    assert await services.session.validate_session() is True
    assert services.session.is_authenticated


async def test_validate_session_tolerates_unreachable_refresh(backend):
    services = await signed_in_services(backend)
    backend.access_tokens.clear()
    backend.fail("POST", "/auth/v1/token", status=503, times=2)

    assert await services.session.validate_session() is True
    assert services.session.is_authenticated
    assert services.store.session is not None


async def test_monitor_signs_out_revoked_session(backend):
    services = await signed_in_services(backend)
    services.session.check_interval = 0.01
    backend.revoke_all_tokens()

    async with anyio.create_task_group() as tg:
        tg.start_soon(services.session.run_monitor)
        with anyio.fail_after(2):
            while services.session.is_authenticated:
                await anyio.sleep(0.01)
        tg.cancel_scope.cancel()

    assert services.session.state == SessionState.ANONYMOUS


async def test_foreground_with_stale_connection_reconnects(backend):
    services = await signed_in_services(backend)
    backend.fail("GET", "/rest/v1/profiles", hang=True)

    outcome = await services.session.handle_visibility_change(True)

    assert outcome == {"probed": True, "reconnected": True, "session_valid": True}
    assert services.provider.generation == 1


async def test_foreground_with_reset_connection_reconnects(backend):
    services = await signed_in_services(backend)
    backend.fail("GET", "/rest/v1/profiles", network=True)

    outcome = await services.session.handle_visibility_change(True)

    assert outcome["reconnected"] is True
    assert services.provider.generation == 1


async def test_foreground_rejection_keeps_client(backend):
    services = await signed_in_services(backend)
    backend.fail("GET", "/rest/v1/profiles", status=403,
                 body={"code": "42501", "message": "permission denied"})

    outcome = await services.session.handle_visibility_change(True)

    assert outcome["reconnected"] is False
    assert services.provider.generation == 0


async def test_foreground_with_healthy_connection_keeps_client(backend):
    services = await signed_in_services(backend)

    outcome = await services.session.handle_visibility_change(True)

    assert outcome["reconnected"] is False
    assert services.provider.generation == 0


async def test_going_hidden_does_nothing(backend):
    services = await signed_in_services(backend)
    calls = len(backend.calls)

    outcome = await services.session.handle_visibility_change(False)

    assert outcome["probed"] is False
    assert len(backend.calls) == calls
