"""
Session reconciliation engine.

Keeps a single answer to "who is logged in" while three sources race to
change it: the initial session probe, the backend's auth-event stream, and
explicit login/logout calls. Transitions are decided by the pure reducer;
this class owns the I/O, the timeouts and the guards around it.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from shared.config import Settings, get_settings
from shared.models import UserProfile

from .classifier import ErrorClassifier, MessagePatternClassifier, to_session_error
from .exceptions import ProfileNotFoundError
from .guards import EventDeduplicator, InFlightGuard, OverlapGuard
from .interfaces import IAuthBackend, IProfileStore, ISessionService, SessionListener
from .models import AuthEventType, AuthIdentity, ErrorKind, Session, SessionStatus
from .reducer import INITIAL_SESSION, SessionAction, reduce

logger = logging.getLogger(__name__)

_HANDLED_EVENTS = {event.value for event in AuthEventType}


async def find_profile(
    profiles: IProfileStore, auth_id: Optional[str], email: Optional[str]
) -> Optional[UserProfile]:
    """
    Cross-reference an auth identity with its staff profile.

    Profiles are matched on the ``auth_id`` link first, then on email for
    rows not yet linked to an auth user.
    """
    profile = await profiles.get_user_by_auth_id(auth_id) if auth_id else None
    if profile is None and email:
        profile = await profiles.get_user_by_email(email)
    return profile


class SessionService(ISessionService):
    """
    Owner of the process-wide Session.

    Create one per application, call ``start()`` once, and pass it by
    reference to whatever needs to know the current user.
    """

    def __init__(
        self,
        auth_backend: IAuthBackend,
        profiles: IProfileStore,
        settings: Optional[Settings] = None,
        classifier: Optional[ErrorClassifier] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._auth = auth_backend
        self._profiles = profiles
        self._settings = settings or get_settings()
        self._classifier = classifier or MessagePatternClassifier()

        self._state: Session = INITIAL_SESSION
        self._listeners: list[SessionListener] = []

        self._initializing = True
        self._login_guard = OverlapGuard()
        self._logout_guard = InFlightGuard(self._settings.logout_timeout, clock)
        self._deduplicator = EventDeduplicator(self._settings.auth_event_dedupe_window, clock)

        self._unsubscribe: Optional[Callable[[], None]] = None
        self._pending: set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def state(self) -> Session:
        return self._state

    @property
    def initializing(self) -> bool:
        return self._initializing

    @property
    def logout_in_progress(self) -> bool:
        return self._logout_guard.active

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> Session:
        """
        Subscribe to auth events and run the initial session probe.

        Events delivered while the probe runs are dropped; the probe's own
        result wins.
        """
        if self._unsubscribe is None:
            self._unsubscribe = self._auth.on_auth_state_change(self._on_auth_event)
        await self._probe()
        return self._state

    async def close(self) -> None:
        """Stop listening to auth events and cancel in-progress handlers."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        pending = self._cancel_pending_events()
        if pending:
            await asyncio.wait(pending)
        self._pending.clear()

    async def wait_for_pending_events(self) -> None:
        """Wait until every scheduled auth-event handler has finished."""
        while self._pending:
            await asyncio.wait(list(self._pending))

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> Session:
        """
        Sign in and resolve the staff profile.

        On failure the session becomes unauthenticated (with the classified
        ``error_kind``) and the classified exception is raised.
        """
        self._login_guard.acquire()
        self._cancel_pending_events()
        self._dispatch(SessionAction.login_started())
        identity: Optional[AuthIdentity] = None
        try:
            identity = await self._auth.sign_in(email, password)
            profile = await self._resolve_profile(identity)
        except Exception as exc:
            kind = self._classifier.classify(exc)
            logger.info("Login failed for %s (%s): %s", email, kind.value, exc)
            self._dispatch(SessionAction.auth_failed(kind))
            if identity is not None:
                await self._discard_backend_session()
            error = to_session_error(exc, kind)
            if error is exc:
                raise
            raise error from exc
        finally:
            self._login_guard.release()

        self._dispatch(SessionAction.resolved(profile, identity.id))
        return self._state

    async def logout(self) -> Session:
        """
        Sign out.

        The session flips to unauthenticated before the network call, and
        auth-event handlers still resolving a profile are cancelled so they
        cannot sign the user back in. A logout already in progress turns
        concurrent calls into no-ops.
        """
        if not self._logout_guard.try_acquire():
            logger.debug("Logout already in progress, ignoring")
            return self._state

        self._cancel_pending_events()
        self._dispatch(SessionAction.signed_out())
        self._deduplicator.clear()
        try:
            await asyncio.wait_for(self._auth.sign_out(), timeout=self._settings.logout_timeout)
        except asyncio.TimeoutError:
            logger.warning("Sign-out call timed out after %.1fs", self._settings.logout_timeout)
        except Exception as exc:
            logger.warning("Sign-out call failed: %s", exc)
        finally:
            self._logout_guard.release()
        return self._state

    async def retry_connection(self) -> Session:
        """Re-run the initial probe; only meaningful after a connection error."""
        if self._state.status != SessionStatus.CONNECTION_ERROR:
            logger.debug("retry_connection ignored in state %s", self._state.status.value)
            return self._state
        self._dispatch(SessionAction.retry_started())
        await self._probe()
        return self._state

    # -------------------------------------------------------------------------
    # Probe
    # -------------------------------------------------------------------------

    async def _probe(self) -> None:
        self._initializing = True
        self._dispatch(SessionAction.probe_started())
        try:
            await asyncio.wait_for(
                self._restore_session(),
                timeout=self._settings.session_probe_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Session probe timed out after %.1fs", self._settings.session_probe_timeout
            )
            self._dispatch(SessionAction.connection_failed())
        except Exception as exc:
            self._dispatch_failure(exc, "Session probe")
        finally:
            self._initializing = False

    async def _restore_session(self) -> None:
        identity = await self._auth.get_session()
        if identity is None:
            logger.info("No existing session found")
            self._dispatch(SessionAction.signed_out())
            return
        profile = await self._resolve_profile(identity)
        self._dispatch(SessionAction.resolved(profile, identity.id))

    # -------------------------------------------------------------------------
    # Auth events
    # -------------------------------------------------------------------------

    def _on_auth_event(self, event: str, identity: Optional[AuthIdentity]) -> None:
        """Backend callback; filters synchronously, then schedules handling."""
        reason = self._ignore_reason(event, identity)
        if reason is not None:
            logger.debug("Ignoring auth event %s: %s", event, reason)
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Auth event %s delivered outside the event loop, ignoring", event)
            return

        task = loop.create_task(self._handle_auth_event(event, identity))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _ignore_reason(self, event: str, identity: Optional[AuthIdentity]) -> Optional[str]:
        if self._initializing:
            return "initial probe in progress"
        if self._logout_guard.active:
            return "logout in progress"
        if event not in _HANDLED_EVENTS:
            return "event not handled"
        if self._login_guard.active:
            # login() owns the outcome of its own sign-in and cleanup sign-out
            return "login in progress"
        email = identity.email if identity else None
        if self._deduplicator.is_duplicate((event, email)):
            return "duplicate within window"
        if event == AuthEventType.SIGNED_IN.value and self._is_current(identity):
            return "already signed in as this user"
        return None

    async def _handle_auth_event(self, event: str, identity: Optional[AuthIdentity]) -> None:
        try:
            if event == AuthEventType.SIGNED_OUT.value:
                self._dispatch(SessionAction.signed_out())
            elif event == AuthEventType.TOKEN_REFRESHED.value:
                await self._on_token_refreshed(identity)
            elif event == AuthEventType.SIGNED_IN.value:
                await self._on_signed_in(identity)
        except Exception:
            logger.exception("Unexpected error while handling auth event %s", event)

    async def _on_signed_in(self, identity: Optional[AuthIdentity]) -> None:
        if identity is None:
            logger.warning("SIGNED_IN event without a session, ignoring")
            return
        if self._is_current(identity):
            return
        try:
            profile = await asyncio.wait_for(
                self._resolve_profile(identity),
                timeout=self._settings.sign_in_event_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Sign-in processing timed out after %.1fs", self._settings.sign_in_event_timeout
            )
            self._dispatch(SessionAction.auth_failed(ErrorKind.CONNECTION))
        except Exception as exc:
            self._dispatch_failure(exc, "Sign-in event")
        else:
            self._dispatch(SessionAction.resolved(profile, identity.id))

    async def _on_token_refreshed(self, identity: Optional[AuthIdentity]) -> None:
        if identity is None:
            return
        if self._is_current(identity):
            self._dispatch(SessionAction.token_refreshed(identity.id))
            return
        logger.info("Token refreshed for a different identity, resolving profile")
        await self._on_signed_in(identity)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _is_current(self, identity: Optional[AuthIdentity]) -> bool:
        return (
            identity is not None
            and self._state.authenticated
            and self._state.auth_id == identity.id
        )

    async def _resolve_profile(self, identity: AuthIdentity) -> UserProfile:
        """
        Find the staff profile for an auth identity.

        Right after sign-in the profile row may not be visible yet, so an
        empty result is retried with incremental backoff before giving up.
        """
        attempts = max(1, self._settings.profile_retry_attempts)
        for attempt in range(1, attempts + 1):
            profile = await self._lookup_profile(identity)
            if profile is not None:
                return profile
            if attempt < attempts:
                delay = self._settings.profile_retry_backoff * attempt
                logger.debug(
                    "Profile for %s not found (attempt %d/%d), retrying in %.2fs",
                    identity.id, attempt, attempts, delay,
                )
                await asyncio.sleep(delay)
        raise ProfileNotFoundError(identity.id, identity.email)

    async def _lookup_profile(self, identity: AuthIdentity) -> Optional[UserProfile]:
        profile = await find_profile(self._profiles, identity.id, identity.email)
        if profile is not None and not profile.email and identity.email:
            # Email lives on the auth user, not on the profile row
            profile = profile.model_copy(update={"email": identity.email})
        return profile

    def _cancel_pending_events(self) -> list[asyncio.Task]:
        """
        Cancel auth-event handlers still in progress.

        Their outcome was decided against a session that an explicit
        login/logout is about to replace.
        """
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            logger.debug("Cancelled %d pending auth event handler(s)", len(pending))
        return pending

    async def _discard_backend_session(self) -> None:
        try:
            await asyncio.wait_for(self._auth.sign_out(), timeout=self._settings.logout_timeout)
        except Exception as exc:
            logger.warning("Could not close backend session after failed login: %s", exc)

    def _dispatch_failure(self, error: BaseException, context: str) -> ErrorKind:
        kind = self._classifier.classify(error)
        if kind == ErrorKind.CONNECTION:
            logger.warning("%s failed with a connection error: %s", context, error)
            self._dispatch(SessionAction.connection_failed())
        else:
            logger.info("%s failed (%s): %s", context, kind.value, error)
            self._dispatch(SessionAction.auth_failed(kind))
        return kind

    def _dispatch(self, action: SessionAction) -> None:
        previous = self._state
        self._state = reduce(previous, action)
        if self._state is previous:
            return
        logger.info(
            "Session %s -> %s (%s)",
            previous.status.value, self._state.status.value, action.type.value,
        )
        for listener in list(self._listeners):
            listener(self._state)
