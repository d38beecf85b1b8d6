"""
Session state for the multi-step checkout wizard.

Wizard state is stored as one flat JSON blob in request.session['checkout_wizard']:
{
    "started_at":      1760000000,
    "current_step":    2,
    "completed_steps": [1],
    "form_data":       {"field_1": "...", ...},
    "signature_data":  {"timestamp": ..., "ip_address": "...", "contract_version": "1.0", ...},
    "wizard_version":  "1.0",
    "expires_at":      1760001200,
    "completed_at":    null,
}

Use SessionState instead of touching the blob directly: it checks the blob's
shape on every read, drops expired state and refreshes the expiry on every write.
"""
import logging
from typing import Annotated, Any

from django.db import DatabaseError
from django.utils import timezone
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, field_serializer

from .conf import DEFAULT_WIZARD_VERSION, STEPS, TOTAL_STEPS
from .exceptions import PersistenceUnavailable

logger = logging.getLogger(__name__)

SESSION_KEY = 'checkout_wizard'

# Mapping fields merged key-by-key on update; everything else is replaced.
MERGED_FIELDS = ('form_data', 'signature_data')
SCALAR_FIELDS = ('current_step', 'wizard_version', 'completed_at')

StepNumber = Annotated[StrictInt, Field(ge=1, le=TOTAL_STEPS)]


def epoch_now() -> int:
    return int(timezone.now().timestamp())


class WizardSession(BaseModel):
    """One shopper's wizard state. Assignments are validated as well as loads."""

    model_config = ConfigDict(validate_assignment=True)

    started_at: StrictInt = Field(description='Epoch seconds the wizard was started')
    expires_at: StrictInt = Field(description='Epoch seconds after which the state is dropped')
    current_step: StepNumber = 1
    completed_steps: set[StepNumber] = Field(default_factory=set)
    form_data: dict[str, Any] = Field(default_factory=dict)
    signature_data: dict[str, Any] = Field(default_factory=dict)
    wizard_version: StrictStr = DEFAULT_WIZARD_VERSION
    completed_at: StrictInt | None = None

    @field_serializer('completed_steps')
    def _sorted_steps(self, steps: set) -> list:
        return sorted(steps)

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None and set(STEPS) <= self.completed_steps

    def is_expired(self, now: int) -> bool:
        return now > self.expires_at


class SessionStoreAdapter:
    """
    Reads and writes the wizard blob in one shopper's Django session.

    `session` is request.session; None means the session middleware is not
    active for this request, which makes the store unavailable.
    """

    def __init__(self, session, key: str = SESSION_KEY):
        self.session = session
        self.key = key

    @property
    def session_id(self) -> str:
        if self.session is None:
            return 'no-session'
        return self.session.session_key or 'new-session'

    def is_available(self) -> bool:
        return self.session is not None

    def _require_session(self):
        if self.session is None:
            raise PersistenceUnavailable('No session is attached to this request.')
        return self.session

    def get(self):
        session = self._require_session()
        try:
            return session.get(self.key)
        except DatabaseError as exc:
            raise PersistenceUnavailable(f'Session backend read failed: {exc}') from exc

    def set(self, blob: dict) -> None:
        session = self._require_session()
        try:
            session[self.key] = blob
        except DatabaseError as exc:
            raise PersistenceUnavailable(f'Session backend write failed: {exc}') from exc
        session.modified = True

    def delete(self) -> None:
        session = self._require_session()
        try:
            session.pop(self.key, None)
        except DatabaseError as exc:
            raise PersistenceUnavailable(f'Session backend delete failed: {exc}') from exc
        session.modified = True


class SessionState:
    """Durable wizard state for one shopper, built on a SessionStoreAdapter."""

    def __init__(self, store: SessionStoreAdapter, ttl: int, wizard_version: str, clock=epoch_now):
        self.store = store
        self.ttl = ttl
        self.wizard_version = wizard_version
        self.clock = clock

    @property
    def session_id(self) -> str:
        return self.store.session_id

    @property
    def available(self) -> bool:
        return self.store.is_available()

    def now(self) -> int:
        return self.clock()

    def _fresh(self) -> WizardSession:
        now = self.now()
        return WizardSession(
            started_at=now,
            expires_at=now + self.ttl,
            wizard_version=self.wizard_version,
        )

    def _save(self, session: WizardSession) -> bool:
        session.expires_at = self.now() + self.ttl
        try:
            self.store.set(session.model_dump(mode='json'))
        except PersistenceUnavailable as exc:
            logger.error('Wizard session not saved (session %s): %s', self.session_id, exc)
            return False
        logger.debug(
            'Wizard session saved (session %s): step=%s completed=%s expires_at=%s',
            self.session_id, session.current_step, sorted(session.completed_steps), session.expires_at,
        )
        return True

    def start(self) -> bool:
        """Replace any existing wizard state with a fresh session at step 1."""
        if not self.available:
            logger.error('Cannot start wizard: session store unavailable')
            return False
        started = self._save(self._fresh())
        if started:
            logger.info('Wizard session started (session %s)', self.session_id)
        return started

    def read(self) -> WizardSession | None:
        """
        Current wizard session, or None if absent, malformed or expired.
        Raises PersistenceUnavailable if the store cannot be read: callers must
        not mistake a backend failure for a shopper without a wizard.
        """
        blob = self.store.get()
        if not blob:
            return None

        try:
            session = WizardSession.model_validate(blob)
        except ValidationError as exc:
            logger.warning('Discarding malformed wizard session (session %s): %s', self.session_id, exc)
            self.clear()
            return None

        if session.is_expired(self.now()):
            logger.info('Wizard session expired (session %s)', self.session_id)
            self.clear()
            return None
        return session

    def update(self, partial: dict) -> bool:
        """
        Merge `partial` into the stored session and refresh its expiry.

        form_data / signature_data are merged key by key, completed_steps only
        ever grows, scalar fields are replaced. Returns False, writing nothing,
        when there is no active session or the store cannot be read.
        """
        if not self.available:
            logger.error('Wizard session not updated: session store unavailable')
            return False

        try:
            session = self.read()
        except PersistenceUnavailable as exc:
            logger.error('Wizard session not updated, read failed (session %s): %s', self.session_id, exc)
            return False
        if session is None:
            logger.warning('Wizard session not updated: no active session (session %s)', self.session_id)
            return False

        for name, value in partial.items():
            if name in MERGED_FIELDS:
                setattr(session, name, {**getattr(session, name), **value})
            elif name == 'completed_steps':
                session.completed_steps = session.completed_steps | set(value)
            elif name in SCALAR_FIELDS:
                setattr(session, name, value)
            else:
                raise ValueError(f'Unknown wizard session field: {name}')
        return self._save(session)

    def clear(self) -> bool:
        try:
            self.store.delete()
        except PersistenceUnavailable as exc:
            logger.error('Wizard session not cleared (session %s): %s', self.session_id, exc)
            return False
        logger.debug('Wizard session cleared (session %s)', self.session_id)
        return True
