# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from payroll.views.worker_view import WorkerViewSet

app_name = "worker"

router = SimpleRouter()
router.register(r"", WorkerViewSet, basename="workers")

urlpatterns = [
    path("", include(router.urls)),
]
