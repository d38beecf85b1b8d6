"""
ContentPage: a publishable content page. Four of them host the checkout
wizard steps (mapped by slug in settings.WIZARD_WORKFLOW_PAGES).
"""
from django.db import models
from django.urls import reverse
from apps.core.models import BaseModel


class PublishedQuerySet(models.QuerySet):
    def published(self):
        return self.filter(is_published=True)


class ContentPage(BaseModel):
    title = models.CharField(max_length=150)
    slug = models.SlugField(max_length=150, unique=True)
    body = models.TextField(blank=True)
    is_published = models.BooleanField(default=False, db_index=True)

    objects = PublishedQuerySet.as_manager()

    class Meta:
        verbose_name = 'Content Page'
        verbose_name_plural = 'Content Pages'
        ordering = ['title']

    def __str__(self):
        return f"{self.title} [{'published' if self.is_published else 'draft'}]"

    def get_absolute_url(self):
        return reverse('pages:detail', kwargs={'slug': self.slug})
