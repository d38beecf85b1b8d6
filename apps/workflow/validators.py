"""
Step validation for the checkout wizard: pure predicates, no session writes.

Public API:
  StepValidator.data_is_valid(step, submitted_data, session)
  StepValidator.transition_is_legal(requested_step, session)
  StepValidator.allowed_step(session)
  StepValidator.can_access_step(step, session)

The check_* variants raise ValidationFailure / SequenceViolation with a reason
and are what the engine uses; the boolean predicates wrap them.
"""
import logging

from .conf import DEFAULT_REQUIRED_FIELDS, STEPS, TOTAL_STEPS
from .exceptions import SequenceViolation, ValidationFailure

logger = logging.getLogger(__name__)

FALSY_STRINGS = {'', '0', 'false', 'off', 'no'}
PREREQUISITE_STEPS = frozenset(range(1, TOTAL_STEPS))     # {1, 2, 3}


def is_blank(value) -> bool:
    """Empty string, None or an empty collection. Numbers are never blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


def is_truthy(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in FALSY_STRINGS
    return bool(value)


class StepValidator:

    def __init__(self, cart, required_fields=DEFAULT_REQUIRED_FIELDS):
        self.cart = cart
        self.required_fields = tuple(required_fields)

    # ── Step data ─────────────────────────────────────────────────────────────

    def missing_fields(self, submitted_data: dict) -> list:
        return [name for name in self.required_fields if is_blank(submitted_data.get(name))]

    def check_step_data(self, step: int, submitted_data: dict, session=None) -> None:
        """Raise ValidationFailure if `submitted_data` does not satisfy `step`."""
        if step == 1:
            if self.cart.cart_is_empty():
                raise ValidationFailure(step, 'Your cart is empty.')
            if not self.cart.cart_has_bookable_item():
                raise ValidationFailure(step, 'Your cart does not contain a bookable product.')

        elif step == 2:
            missing = self.missing_fields(submitted_data)
            if missing:
                raise ValidationFailure(step, f"Missing required fields: {', '.join(missing)}.")

        elif step == 3:
            if not is_truthy(submitted_data.get('signature_accepted')):
                raise ValidationFailure(step, 'The contract must be accepted before continuing.')

        elif step == TOTAL_STEPS:
            completed = session.completed_steps if session is not None else set()
            missing_steps = sorted(PREREQUISITE_STEPS - completed)
            if missing_steps:
                raise ValidationFailure(step, f'Steps not completed: {missing_steps}.')
            if not session.form_data or not session.signature_data:
                raise ValidationFailure(step, 'Customer information or signature is missing.')

        else:
            raise ValidationFailure(step, f'Unknown step {step!r}.')

    def data_is_valid(self, step: int, submitted_data: dict, session=None) -> bool:
        try:
            self.check_step_data(step, submitted_data, session)
        except ValidationFailure as exc:
            logger.info('Step %s data rejected: %s', step, exc.reason)
            return False
        return True

    # ── Transitions ───────────────────────────────────────────────────────────

    def check_transition(self, requested_step: int, session) -> None:
        """Raise SequenceViolation unless `requested_step` may be completed now."""
        if session is None:
            raise SequenceViolation(requested_step, 0)
        if session.is_complete:
            raise SequenceViolation(requested_step, TOTAL_STEPS)
        if requested_step != session.current_step:
            raise SequenceViolation(requested_step, session.current_step)
        if requested_step > 1 and requested_step - 1 not in session.completed_steps:
            raise SequenceViolation(requested_step, session.current_step)

    def transition_is_legal(self, requested_step: int, session) -> bool:
        try:
            self.check_transition(requested_step, session)
        except SequenceViolation:
            return False
        return True

    # ── Access ────────────────────────────────────────────────────────────────

    @staticmethod
    def is_coherent(session) -> bool:
        """
        Completed steps must form an unbroken run 1..k, and every step before
        current_step must be in it. Steps after current_step may be completed
        already: that is a shopper who went back to redo a step.
        """
        completed = session.completed_steps
        if not completed <= set(STEPS):
            return False
        if completed != set(range(1, len(completed) + 1)):
            return False
        return all(step in completed for step in range(1, session.current_step))

    def allowed_step(self, session) -> int:
        """
        Step the shopper may view. 0 means there is no usable workflow
        (no session or no bookable item) and the shopper belongs on the cart.
        """
        if session is None:
            return 0
        if not self.cart.cart_has_bookable_item():
            return 0
        if session.is_complete:
            return TOTAL_STEPS

        if not self.is_coherent(session):
            logger.warning(
                'Incoherent wizard session: current_step=%s completed_steps=%s',
                session.current_step, sorted(session.completed_steps, key=str),
            )
            return 1
        return session.current_step

    def can_access_step(self, step: int, session) -> bool:
        if step == 1:
            return self.cart.cart_has_bookable_item()
        if session is None:
            return False
        return step - 1 in session.completed_steps
