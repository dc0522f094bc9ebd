from django.contrib import admin

from reports.models import TransactionReport


@admin.register(TransactionReport)
class TransactionReportAdmin(admin.ModelAdmin):
    """Moderation happens here: only the status is editable"""

    list_display = ["id", "order", "reporter", "category", "status", "created_at"]
    list_filter = ["status", "category"]
    search_fields = ["reporter__username", "detail"]
    readonly_fields = ["order", "reporter", "category", "detail", "proof_ref", "created_at", "updated_at"]
