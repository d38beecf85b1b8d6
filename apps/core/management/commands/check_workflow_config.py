"""
management command: check_workflow_config

Verifies that every checkout wizard step maps to a published page and that
the session TTL is within the supported range. Exits non-zero on problems,
so it can run as a deploy check:

    python manage.py check_workflow_config
"""
from django.core.management.base import BaseCommand, CommandError

from apps.workflow import conf
from apps.workflow.diagnostics import validate_configuration


class Command(BaseCommand):
    help = 'Check the checkout wizard page mapping and session settings'

    def handle(self, *args, **options):
        problems = validate_configuration()
        if problems:
            for problem in problems:
                self.stderr.write(self.style.ERROR(f'  ✘ {problem}'))
            raise CommandError(f'check_workflow_config: {len(problems)} problem(s) found')

        for step in conf.STEPS:
            slug = conf.workflow_pages().get(conf.step_key(step))
            self.stdout.write(f'  Step {step} ({conf.STEP_LABELS[step]}): /{slug}/')
        self.stdout.write(
            self.style.SUCCESS(
                f'check_workflow_config: wizard OK '
                f'(ttl {conf.session_ttl()}s, version {conf.wizard_version()})'
            )
        )
