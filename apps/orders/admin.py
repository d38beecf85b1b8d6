from django.contrib import admin
from .models import Order, OrderNote


class OrderNoteInline(admin.TabularInline):
    model = OrderNote
    extra = 0
    readonly_fields = ['note', 'created_at']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['short_id', 'status', 'wizard_version', 'created_at', 'placed_at']
    list_filter = ['status', 'wizard_version']
    search_fields = ['session_key']
    readonly_fields = [
        'id', 'session_key', 'form_data', 'signature_data', 'wizard_version',
        'placed_at', 'created_at', 'updated_at',
    ]
    inlines = [OrderNoteInline]
    fieldsets = (
        ('Order', {'fields': ('id', 'session_key', 'status', 'placed_at')}),
        ('Wizard data', {'fields': ('wizard_version', 'form_data', 'signature_data')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def short_id(self, obj):
        return obj.id_short
    short_id.short_description = 'ID'
