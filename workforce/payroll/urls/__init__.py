from django.urls import path, include

urlpatterns = [
    path("salaries/", include("payroll.urls.salary_urls")),
    path("attendance/", include("payroll.urls.attendance_urls")),
    path("advances/", include("payroll.urls.advance_urls")),
    path("expenses/", include("payroll.urls.expense_urls")),
    path("workers/", include("payroll.urls.worker_urls")),
]
