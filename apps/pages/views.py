"""
Content pages. Pages mapped to a wizard step are protected by
WorkflowGuardMiddleware before these views run. The guard lets a request
through when it cannot redirect, so step pages also check that the previous
step is completed before showing their content.
"""
from django.shortcuts import get_object_or_404, render

from apps.workflow.conf import STEP_LABELS, required_fields
from .models import ContentPage

STEP_LOCKED_MESSAGE = 'You must complete the previous steps.'


def home(request):
    """Landing page listing the published pages and a link to the shop."""
    pages = ContentPage.objects.published()
    return render(request, 'pages/home.html', {'pages': pages})


def page_detail(request, slug):
    """
    A step page whose previous step is not completed keeps its title and
    progress but shows STEP_LOCKED_MESSAGE instead of its body and form.
    """
    page = get_object_or_404(ContentPage.objects.published(), slug=slug)
    context = {'page': page, 'workflow_step': 0}

    engine = request.workflow
    step = engine.pages.step_for_page(slug)
    if step:
        session = engine.current_session()
        context.update({
            'workflow_step': step,
            'step_accessible': engine.can_access_step(step, session),
            'step_label': STEP_LABELS[step],
            'progress': engine.progress(),
            'required_fields': required_fields(),
            'form_data': session.form_data if session else {},
            'wizard_complete': session is not None and session.is_complete,
            'checkout_url': engine.checkout_url,
            'step_locked_message': STEP_LOCKED_MESSAGE,
        })
    return render(request, 'pages/page.html', context)
