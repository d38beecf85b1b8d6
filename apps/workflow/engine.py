"""
Workflow engine for the checkout wizard. No HTTP/request awareness: the
request-scoped collaborators are handed in by services.build_workflow().

States: NoSession -> Step1 -> Step2 -> Step3 -> Step4 -> Complete

Public API:
  advance(current_step, step_data)   -> {success, message, redirect_url, next_step}
  go_back(current_step)              -> {success, message, redirect_url, previous_step}
  progress()                         -> {current_step, total_steps, completed_steps, ...}
  is_complete()
  allowed_step_for(session)
  can_access_step(step, session)     previous step completed (step pages hide their body otherwise)
  reconcile()                        allowed step for a page view, restarting broken sessions
  on_bookable_item_added()           NoSession -> Step1
  ensure_session()
  url_for_step(step)
"""
import logging

from .conf import STEP_LABELS, TOTAL_STEPS
from .exceptions import PersistenceUnavailable, SequenceViolation, ValidationFailure

logger = logging.getLogger(__name__)

STEP_COMPLETED_MESSAGE = 'Step completed successfully.'
STEP_INVALID_MESSAGE = 'The step data is not valid.'
STEP_BACK_MESSAGE = 'Returned to the previous step.'
FIRST_STEP_MESSAGE = 'You are already at the first step.'
BACK_REFUSED_MESSAGE = 'Unable to return to the previous step.'
RETRY_MESSAGE = 'Your progress could not be saved. Please try again.'


def _result(success: bool, message: str, redirect_url: str = '', **extra) -> dict:
    result = {'success': success, 'message': message, 'redirect_url': redirect_url}
    result.update(extra)
    return result


class WorkflowEngine:

    def __init__(self, state, validator, pages, orders, client_ip: str = 'unknown',
                 checkout_url: str = '', cart_url: str = ''):
        self.state = state
        self.validator = validator
        self.pages = pages
        self.orders = orders
        self.client_ip = client_ip or 'unknown'
        self.checkout_url = checkout_url
        self.cart_url = cart_url

    @property
    def cart(self):
        return self.validator.cart

    # ── Queries ───────────────────────────────────────────────────────────────

    def current_session(self):
        """
        Session for read-only display. A store failure is logged and reads as
        no session; anything that writes goes through state.read() instead.
        """
        try:
            return self.state.read()
        except PersistenceUnavailable as exc:
            logger.error('Wizard session not readable (session %s): %s', self.state.session_id, exc)
            return None

    def cart_has_bookable_item(self) -> bool:
        return self.cart.cart_has_bookable_item()

    def is_complete(self) -> bool:
        session = self.current_session()
        return session is not None and session.is_complete

    def allowed_step_for(self, session) -> int:
        return self.validator.allowed_step(session)

    def can_access_step(self, step: int, session) -> bool:
        return self.validator.can_access_step(step, session)

    def progress(self) -> dict:
        session = self.current_session()
        completed = sorted(session.completed_steps) if session else []
        return {
            'current_step': session.current_step if session else 1,
            'total_steps': TOTAL_STEPS,
            'completed_steps': completed,
            'progress_percentage': len(completed) / TOTAL_STEPS * 100,
            'step_labels': dict(STEP_LABELS),
        }

    def url_for_step(self, step: int) -> str:
        """
        URL for a step: 0 is the cart, past the last step is the checkout.
        Returns '' when the step's page is missing; callers must not redirect then.
        """
        if step <= 0:
            return self.cart_url
        if step > TOTAL_STEPS:
            return self.checkout_url
        url = self.pages.resolve_url(step)
        if not url:
            logger.error('No page URL for wizard step %s (session %s)', step, self.state.session_id)
            return ''
        return url

    # ── Session lifecycle ─────────────────────────────────────────────────────

    def on_bookable_item_added(self) -> bool:
        """A bookable item entered the cart: begin a new wizard at step 1."""
        if not self.cart_has_bookable_item():
            return False
        return self.state.start()

    def ensure_session(self) -> bool:
        """Start a wizard unless one is active. Never starts over unreadable state."""
        try:
            if self.state.read() is not None:
                return True
        except PersistenceUnavailable as exc:
            logger.error('Wizard session not readable (session %s): %s', self.state.session_id, exc)
            return False
        return self.state.start()

    def reconcile(self) -> int:
        """
        Allowed step for a page view. An incoherent session is restarted so
        the shopper can actually act on step 1. Raises PersistenceUnavailable
        if the session store cannot be read.
        """
        session = self.state.read()
        allowed = self.validator.allowed_step(session)
        if allowed == 1 and session is not None and not self.validator.is_coherent(session):
            logger.warning('Restarting incoherent wizard session %s', self.state.session_id)
            self.state.start()
        return allowed

    def clear(self) -> bool:
        return self.state.clear()

    # ── Transitions ───────────────────────────────────────────────────────────

    def advance(self, current_step: int, step_data: dict = None) -> dict:
        """Complete `current_step` with `step_data` and move to the next step."""
        step_data = dict(step_data or {})
        logger.info(
            'Advance requested: step=%s fields=%s (session %s)',
            current_step, sorted(step_data), self.state.session_id,
        )

        try:
            next_step = self._complete_step(current_step, step_data)
        except ValidationFailure as exc:
            logger.info('Step %s rejected (session %s): %s', exc.step, self.state.session_id, exc.reason)
            return _result(False, STEP_INVALID_MESSAGE)
        except SequenceViolation as exc:
            logger.warning(
                'Out-of-sequence advance (session %s): attempted=%s allowed=%s',
                self.state.session_id, exc.attempted, exc.allowed,
            )
            return _result(False, STEP_INVALID_MESSAGE)
        except PersistenceUnavailable as exc:
            logger.error('Advance from step %s not saved (session %s): %s', current_step, self.state.session_id, exc)
            return _result(False, RETRY_MESSAGE)

        logger.info('Step %s completed, next step %s (session %s)', current_step, next_step, self.state.session_id)
        return _result(True, STEP_COMPLETED_MESSAGE, self.url_for_step(next_step), next_step=next_step)

    def go_back(self, current_step: int) -> dict:
        if current_step <= 1:
            return _result(False, FIRST_STEP_MESSAGE)

        previous_step = current_step - 1
        try:
            self._step_back(current_step)
        except SequenceViolation as exc:
            logger.warning(
                'Out-of-sequence back (session %s): attempted=%s allowed=%s',
                self.state.session_id, exc.attempted, exc.allowed,
            )
            return _result(False, BACK_REFUSED_MESSAGE)
        except PersistenceUnavailable as exc:
            logger.error('Back from step %s not saved (session %s): %s', current_step, self.state.session_id, exc)
            return _result(False, RETRY_MESSAGE)

        logger.info('Went back from step %s to %s (session %s)', current_step, previous_step, self.state.session_id)
        return _result(True, STEP_BACK_MESSAGE, self.url_for_step(previous_step), previous_step=previous_step)

    # ── Internals ─────────────────────────────────────────────────────────────

    def _complete_step(self, step: int, step_data: dict) -> int:
        if not self.state.available:
            raise PersistenceUnavailable('Session store unavailable.')

        # Re-read on every write: a double-submitted step sees the already
        # advanced session and fails the sequence check.
        session = self.state.read()
        self.validator.check_transition(step, session)
        self.validator.check_step_data(step, step_data, session)

        partial = {'completed_steps': {step}}
        partial.update(self._captured_data(step, step_data, session))
        if step < TOTAL_STEPS:
            partial['current_step'] = step + 1
        else:
            self._handoff(session)
            partial['completed_at'] = self.state.now()

        if not self.state.update(partial):
            raise PersistenceUnavailable('Wizard session could not be saved.')
        return step + 1

    def _step_back(self, step: int) -> None:
        if not self.state.available:
            raise PersistenceUnavailable('Session store unavailable.')
        session = self.state.read()
        if session is None:
            raise SequenceViolation(step, 0)
        if session.is_complete or step != session.current_step:
            raise SequenceViolation(step, self.validator.allowed_step(session))
        if not self.state.update({'current_step': step - 1}):
            raise PersistenceUnavailable('Wizard session could not be saved.')

    def _captured_data(self, step: int, step_data: dict, session) -> dict:
        if step == 2:
            return {'form_data': step_data}
        if step == 3:
            # Server stamp goes last so the client cannot supply its own.
            signature = dict(step_data)
            signature.update({
                'timestamp': self.state.now(),
                'ip_address': self.client_ip,
                'contract_version': session.wizard_version,
            })
            return {'signature_data': signature}
        return {}

    def _handoff(self, session) -> None:
        """Attach the captured wizard data to the shopper's pending order."""
        order = self.orders.pending_order()
        self.orders.attach_metadata(order, {
            'form_data': dict(session.form_data),
            'signature_data': dict(session.signature_data),
            'wizard_version': session.wizard_version,
        })
        logger.info('Wizard data handed off to order %s (session %s)', getattr(order, 'pk', order), self.state.session_id)
