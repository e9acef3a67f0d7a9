from django.contrib import admin
from .models import Worker, WageHistory, AttendanceRecord, Advance, ExpenseType, Expense, SalaryCycle, SalaryPayment

admin.site.register(ExpenseType)

class WageHistoryInline(admin.TabularInline):
    model = WageHistory
    extra = 0
    readonly_fields = ("wage", "ot_rate", "effective_from", "reason")

@admin.register(Worker)
class WorkerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "phone", "wage", "ot_rate", "joined_at", "balance", "is_active", "inactive_from")
    list_filter = ("is_active",)
    search_fields = ("name", "phone")
    inlines = [WageHistoryInline]

@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "worker", "date", "status", "ot_units", "wage_at_time", "ot_rate_at_time")
    list_filter = ("status", "date")
    search_fields = ("worker__name",)
    readonly_fields = ("wage_at_time", "ot_rate_at_time")

@admin.register(Advance)
class AdvanceAdmin(admin.ModelAdmin):
    list_display = ("id", "worker", "date", "amount", "reason", "salary")
    list_filter = ("date",)
    search_fields = ("worker__name", "reason")

@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("id", "worker", "date", "type", "amount")
    list_filter = ("type", "date")
    search_fields = ("worker__name", "note")

class SalaryPaymentInline(admin.TabularInline):
    model = SalaryPayment
    extra = 0
    readonly_fields = ("amount", "date", "proof")

@admin.register(SalaryCycle)
class SalaryCycleAdmin(admin.ModelAdmin):
    list_display = ("id", "worker", "cycle_start", "cycle_end", "gross_pay", "net_pay", "total_paid", "status")
    list_filter = ("status",)
    search_fields = ("worker__name",)
    inlines = [SalaryPaymentInline]
