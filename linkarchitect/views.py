"""Django views for the linkarchitect app.

One page hosts the form; submitting it runs the pipeline and renders the
linked article together with the run statistics.
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponse
from django.shortcuts import render

from .engine.errors import LinkArchitectError
from .forms import LinkInjectionForm
from .services import REMEDIATION_HINTS, load_engine_config, ranked_rows, run_link_injection

logger = logging.getLogger(__name__)


def inject(request: HttpRequest) -> HttpResponse:
    """Display the form and, on POST, inject links into the article."""

    if request.method != 'POST':
        return render(request, 'linkarchitect/inject_form.html', {'form': LinkInjectionForm()})

    form = LinkInjectionForm(request.POST)
    if not form.is_valid():
        return render(request, 'linkarchitect/inject_form.html', {'form': form}, status=400)

    sitemap_url: str = form.cleaned_data['sitemap_url']
    article_url: str = form.cleaned_data['article_url']
    num_links: int = form.cleaned_data['num_links']
    config = load_engine_config()

    try:
        result = run_link_injection(sitemap_url, article_url, num_links, config=config)
    except LinkArchitectError as exc:
        logger.warning('Link injection failed for %s: %s', article_url, exc)
        return render(
            request,
            'linkarchitect/inject_form.html',
            {
                'form': form,
                'error': str(exc),
                'hints': REMEDIATION_HINTS,
            },
            status=502,
        )

    return render(
        request,
        'linkarchitect/inject_result.html',
        {
            'result': result,
            'rows': ranked_rows(result, config),
            'links_injected': len(result.inserted),
            'candidates_analyzed': result.candidates_analyzed,
            'word_count': result.word_count,
            'article_url': article_url,
        },
    )
