# apps/clients/models.py
from django.db import models


class Client(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class System(models.Model):
    # PROTECT: klienta z systemami nie da się usunąć (409 w API)
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='systems')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.client.name} / {self.name}"
