"""Run the link injection pipeline from the shell.

Usage::

    python manage.py inject_links https://example.com/sitemap.xml \\
        https://example.com/blog/my-post --links 5 --seed 7 > linked.html
"""

from __future__ import annotations

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError, CommandParser

from linkarchitect.engine.errors import LinkArchitectError
from linkarchitect.services import describe_error, load_engine_config, ranked_rows, run_link_injection


class Command(BaseCommand):
    help = 'Insert links to the most relevant sitemap pages into an article and print the HTML.'

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument('sitemap_url', help='Sitemap or sitemap index URL.')
        parser.add_argument('article_url', help='URL of the article to enrich.')
        parser.add_argument(
            '--links',
            type=int,
            default=getattr(settings, 'LINKARCHITECT_DEFAULT_LINKS', 5),
            help='Number of links to insert.',
        )
        parser.add_argument('--seed', type=int, default=None, help='Seed for the transition sentences.')
        parser.add_argument('--config', default=None, help='YAML file overriding the engine defaults.')

    def handle(self, *args, **options) -> None:
        if options['links'] < 1:
            raise CommandError('--links must be at least 1.')

        config = load_engine_config(options['config'])
        try:
            result = run_link_injection(
                options['sitemap_url'],
                options['article_url'],
                options['links'],
                config=config,
                seed=options['seed'],
            )
        except LinkArchitectError as exc:
            raise CommandError(describe_error(exc)) from exc

        self.stdout.write(result.html)
        self.stderr.write(
            f"Links injected: {len(result.inserted)} | "
            f"Candidates analysed: {result.candidates_analyzed} | "
            f"Words: {result.word_count:,}"
        )
        for row in ranked_rows(result, config):
            self.stderr.write(f"  {row['score']:.3f}  {row['url']}  ({row['reason']})")
