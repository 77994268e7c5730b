"""Forms for the linkarchitect app.

The single form collects the sitemap location, the article to enrich and
how many links to add.
"""

from __future__ import annotations

from django import forms
from django.conf import settings
from django.core.validators import MaxValueValidator


class LinkInjectionForm(forms.Form):
    """Inputs for one pipeline run."""

    sitemap_url = forms.URLField(
        assume_scheme='https',
        label='Sitemap URL',
        help_text='The sitemap or sitemap index of the site (e.g. https://example.com/sitemap.xml).',
        widget=forms.URLInput(attrs={'placeholder': 'https://example.com/sitemap.xml'}),
    )
    article_url = forms.URLField(
        assume_scheme='https',
        label='Article URL',
        help_text='The published article that should receive internal links.',
        widget=forms.URLInput(attrs={'placeholder': 'https://example.com/blog/my-post'}),
    )
    num_links = forms.IntegerField(
        min_value=1,
        label='Number of links',
        help_text='How many link paragraphs to insert into the article.',
    )

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        max_links = getattr(settings, 'LINKARCHITECT_MAX_LINKS', 20)
        field = self.fields['num_links']
        field.max_value = max_links
        field.validators.append(MaxValueValidator(max_links))
        field.initial = getattr(settings, 'LINKARCHITECT_DEFAULT_LINKS', 5)
        field.widget.attrs.update({'min': 1, 'max': max_links})

    def clean(self) -> dict[str, object]:  # type: ignore[override]
        cleaned_data = super().clean()
        sitemap_url = cleaned_data.get('sitemap_url')
        article_url = cleaned_data.get('article_url')
        if sitemap_url and article_url and sitemap_url == article_url:
            raise forms.ValidationError('The sitemap URL and the article URL must be different.')
        return cleaned_data
