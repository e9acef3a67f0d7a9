# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from payroll.views.attendance_view import AttendanceViewSet

app_name = "attendance"

router = SimpleRouter()
router.register(r"", AttendanceViewSet, basename="attendance")

urlpatterns = [
    path("", include(router.urls)),
]
