"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("graphs/options/", views.graph_options, name="graph_options"),
    path("graphs/topics/<str:topic>/", views.topic_graphs, name="topic_graphs"),
    path("graphs/topics/<str:topic>/<str:channel>/", views.channel_graphs, name="channel_graphs"),
    path("graphite_data/", views.graphite_data, name="graphite_data"),
    path("render", views.graphite_render, name="graphite_render"),
]
