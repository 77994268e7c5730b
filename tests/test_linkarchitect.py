from __future__ import annotations

import random
from io import StringIO
from types import SimpleNamespace
from unittest.mock import patch

from django.core.cache import caches
from django.core.management import CommandError, call_command
from django.http import HttpResponse
from django.test import Client, RequestFactory, SimpleTestCase, override_settings
from django.urls import reverse

from linkarchitect.engine.errors import EmptyIndexError, FetchError
from linkarchitect.engine.types import LinkInsertion, PipelineResult, ScoredCandidate
from linkarchitect.forms import LinkInjectionForm
from linkarchitect.middleware import PipelineRunThrottle
from linkarchitect.services import (
    REMEDIATION_HINTS,
    describe_error,
    load_engine_config,
    ranked_rows,
    run_link_injection,
)

SITEMAP_URL = 'https://example.com/sitemap.xml'
ARTICLE_URL = 'https://example.com/blog/trail-running'


def pipeline_result() -> PipelineResult:
    candidate = ScoredCandidate(
        url='https://example.com/blog/trail-shoes',
        title='trail shoes',
        score=0.6123,
        features={'slug': 0.5, 'keywords': 0.3, 'url_structure': 0.5},
    )
    return PipelineResult(
        html='<p>Body</p><p>See <a href="https://example.com/blog/trail-shoes">Trail Shoes</a>.</p>',
        inserted=[
            LinkInsertion(
                url=candidate.url,
                title=candidate.title,
                anchor_text='Trail Shoes',
                paragraph_index=0,
            )
        ],
        ranked=[candidate],
        candidates_analyzed=42,
        word_count=1234,
        article_title='Trail Running',
    )


class LinkInjectionFormTests(SimpleTestCase):
    def form(self, **overrides):
        data = {
            'sitemap_url': SITEMAP_URL,
            'article_url': ARTICLE_URL,
            'num_links': 5,
        }
        data.update(overrides)
        return LinkInjectionForm(data)

    def test_valid_input(self) -> None:
        form = self.form()
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['num_links'], 5)

    def test_num_links_bounds(self) -> None:
        self.assertFalse(self.form(num_links=0).is_valid())
        self.assertFalse(self.form(num_links=21).is_valid())
        self.assertTrue(self.form(num_links=20).is_valid())

    @override_settings(LINKARCHITECT_MAX_LINKS=3)
    def test_num_links_max_follows_settings(self) -> None:
        self.assertFalse(self.form(num_links=4).is_valid())

    def test_rejects_invalid_and_identical_urls(self) -> None:
        self.assertIn('article_url', self.form(article_url='not-a-url').errors)
        form = self.form(article_url=SITEMAP_URL)
        self.assertFalse(form.is_valid())
        self.assertIn('must be different', form.non_field_errors()[0])

    def test_bare_hosts_get_https(self) -> None:
        form = self.form(sitemap_url='example.com/sitemap.xml')
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['sitemap_url'], 'https://example.com/sitemap.xml')

    def test_default_number_of_links(self) -> None:
        self.assertEqual(LinkInjectionForm().fields['num_links'].initial, 5)


class InjectViewTests(SimpleTestCase):
    def setUp(self) -> None:
        caches['default'].clear()
        self.client: Client = Client()
        self.url = reverse('linkarchitect:inject')

    def post(self, **overrides):
        data = {'sitemap_url': SITEMAP_URL, 'article_url': ARTICLE_URL, 'num_links': 3}
        data.update(overrides)
        return self.client.post(self.url, data)

    def test_get_renders_form(self) -> None:
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'linkarchitect/inject_form.html')
        self.assertContains(response, 'name="sitemap_url"')

    @patch('linkarchitect.views.run_link_injection')
    def test_post_renders_linked_article_and_stats(self, mock_run) -> None:
        mock_run.return_value = pipeline_result()

        response = self.post()

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'linkarchitect/inject_result.html')
        self.assertEqual(mock_run.call_args.args, (SITEMAP_URL, ARTICLE_URL, 3))
        self.assertEqual(response.context['links_injected'], 1)
        self.assertEqual(response.context['candidates_analyzed'], 42)
        self.assertEqual(response.context['word_count'], 1234)
        self.assertContains(response, '<dd id="stat-links">1</dd>', html=True)
        self.assertContains(response, '&lt;p&gt;Body&lt;/p&gt;')
        row = response.context['rows'][0]
        self.assertEqual(row['score'], 0.612)
        self.assertEqual(row['reason'], 'strong slug match; partial keyword overlap')

    @patch('linkarchitect.views.run_link_injection')
    def test_engine_error_is_shown_with_hints(self, mock_run) -> None:
        mock_run.side_effect = EmptyIndexError('No URLs found in the sitemap structure')

        response = self.post()

        self.assertEqual(response.status_code, 502)
        self.assertTemplateUsed(response, 'linkarchitect/inject_form.html')
        self.assertContains(response, 'No URLs found in the sitemap structure', status_code=502)
        self.assertContains(response, REMEDIATION_HINTS[0], status_code=502)

    @patch('linkarchitect.views.run_link_injection')
    def test_invalid_form_does_not_run_pipeline(self, mock_run) -> None:
        response = self.post(num_links=0)

        self.assertEqual(response.status_code, 400)
        mock_run.assert_not_called()

    @override_settings(THROTTLE_LIMIT=2)
    @patch('linkarchitect.views.run_link_injection')
    def test_repeated_runs_are_throttled(self, mock_run) -> None:
        mock_run.return_value = pipeline_result()

        self.assertEqual(self.post().status_code, 200)
        self.assertEqual(self.post().status_code, 200)
        blocked = self.post()

        self.assertEqual(blocked.status_code, 429)
        self.assertIn('Retry-After', blocked)
        self.assertEqual(mock_run.call_count, 2)
        self.assertEqual(self.client.get(self.url).status_code, 200)


class PipelineRunThrottleTests(SimpleTestCase):
    def setUp(self) -> None:
        caches['default'].clear()
        self.factory = RequestFactory()

    @override_settings(THROTTLED_ROUTES=['sample:action'])
    def test_throttle_blocks_after_threshold(self) -> None:
        def handler(request):
            return HttpResponse('OK')

        middleware = PipelineRunThrottle(handler, limit=2, window=60, key_prefix='test-throttle')

        def build_request(ip='127.0.0.1'):
            req = self.factory.post('/sample-action/')
            req.resolver_match = SimpleNamespace(namespace='sample', url_name='action', view_name='sample:action')
            req.META['REMOTE_ADDR'] = ip
            return req

        self.assertIsNone(middleware.process_view(build_request(), handler, (), {}))
        self.assertIsNone(middleware.process_view(build_request(), handler, (), {}))
        third = middleware.process_view(build_request(), handler, (), {})
        self.assertEqual(third.status_code, 429)
        self.assertIn(int(third['Retry-After']), (59, 60))
        self.assertIsNone(middleware.process_view(build_request('10.0.0.9'), handler, (), {}))

    @override_settings(THROTTLED_ROUTES=['sample:action'])
    def test_unlisted_routes_and_reads_pass_through(self) -> None:
        middleware = PipelineRunThrottle(lambda request: HttpResponse('OK'), limit=1, key_prefix='test-pass')

        for _ in range(3):
            get = self.factory.get('/sample-action/')
            get.resolver_match = SimpleNamespace(view_name='sample:action')
            self.assertIsNone(middleware.process_view(get, None, (), {}))

            other = self.factory.post('/other/')
            other.resolver_match = SimpleNamespace(view_name='sample:other')
            self.assertIsNone(middleware.process_view(other, None, (), {}))


class ServiceTests(SimpleTestCase):
    @patch('linkarchitect.services.run_pipeline')
    def test_seed_gives_a_seeded_random_source(self, mock_pipeline) -> None:
        run_link_injection(SITEMAP_URL, ARTICLE_URL, 2, seed=9)

        rng = mock_pipeline.call_args.kwargs['rng']
        self.assertEqual(rng.random(), random.Random(9).random())

    def test_describe_error_appends_hints(self) -> None:
        message = describe_error(FetchError('Status 403 for https://example.com/sitemap.xml', status=403))
        self.assertTrue(message.startswith('Status 403'))
        self.assertIn('Please check:', message)
        self.assertTrue(message.endswith(REMEDIATION_HINTS[-1]))

    def test_rows_list_only_linked_pages(self) -> None:
        pages = {
            SITEMAP_URL: (
                '<urlset>'
                '<url><loc>https://example.com/blog/trail-shoes</loc></url>'
                '<url><loc>https://example.com/blog/trail-maps</loc></url>'
                '<url><loc>https://example.com/blog/road-running</loc></url>'
                '</urlset>'
            ),
            ARTICLE_URL: '<html><body><article><p>Trail running.</p><p>Pick shoes.</p></article></body></html>',
        }
        config = load_engine_config()

        with patch('linkarchitect.engine.index.fetch_for', return_value=pages.__getitem__):
            result = run_link_injection(SITEMAP_URL, ARTICLE_URL, 5, config=config, seed=1)

        rows = ranked_rows(result, config)
        self.assertEqual(len(result.inserted), 2)
        self.assertEqual([row['url'] for row in rows], [item.url for item in result.inserted])


class InjectLinksCommandTests(SimpleTestCase):
    @patch('linkarchitect.management.commands.inject_links.run_link_injection')
    def test_prints_html_and_stats(self, mock_run) -> None:
        mock_run.return_value = pipeline_result()
        stdout, stderr = StringIO(), StringIO()

        call_command('inject_links', SITEMAP_URL, ARTICLE_URL, links=2, seed=7, stdout=stdout, stderr=stderr)

        self.assertIn('<p>Body</p>', stdout.getvalue())
        self.assertIn('Links injected: 1', stderr.getvalue())
        self.assertIn('Words: 1,234', stderr.getvalue())
        self.assertIn('https://example.com/blog/trail-shoes', stderr.getvalue())
        self.assertEqual(mock_run.call_args.kwargs['seed'], 7)

    @patch('linkarchitect.management.commands.inject_links.run_link_injection')
    def test_engine_errors_become_command_errors(self, mock_run) -> None:
        mock_run.side_effect = FetchError('Status 404 for https://example.com/sitemap.xml', status=404)

        with self.assertRaises(CommandError) as ctx:
            call_command('inject_links', SITEMAP_URL, ARTICLE_URL, stdout=StringIO(), stderr=StringIO())

        self.assertIn('Please check:', str(ctx.exception))

    def test_links_must_be_positive(self) -> None:
        with self.assertRaises(CommandError):
            call_command('inject_links', SITEMAP_URL, ARTICLE_URL, links=0)
