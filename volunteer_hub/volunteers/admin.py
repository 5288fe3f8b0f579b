from django.contrib import admin

from .models import Task, TaskAssignment, Volunteer


class TaskAssignmentInline(admin.TabularInline):
    model = TaskAssignment
    extra = 0
    autocomplete_fields = ("volunteer",)
    readonly_fields = ("assigned_at",)


@admin.register(Volunteer)
class VolunteerAdmin(admin.ModelAdmin):
    list_display = (
        "full_name",
        "email",
        "role",
        "status",
        "joining_date",
        "last_reminder_sent",
    )

    list_filter = (
        "status",
        "role",
    )

    search_fields = (
        "full_name",
        "email",
        "place",
    )

    readonly_fields = (
        "last_reminder_sent",
        "created_at",
    )

    ordering = ("full_name",)
    list_per_page = 25


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "status",
        "due_date",
        "assigned_count",
        "created_at",
    )

    list_filter = (
        "status",
        "due_date",
    )

    search_fields = ("title", "description")
    inlines = (TaskAssignmentInline,)

    # ----------------------------------------------------------------
    # Helper display methods
    # ----------------------------------------------------------------
    def assigned_count(self, obj):
        return obj.assignments.count()
    assigned_count.short_description = "Volunteers"

    # ----------------------------------------------------------------
    # Admin Actions
    # ----------------------------------------------------------------
    actions = ["mark_completed", "mark_pending"]

    @admin.action(description="Mark selected tasks as COMPLETED")
    def mark_completed(self, request, queryset):
        queryset.update(status=Task.Status.COMPLETED)

    @admin.action(description="Mark selected tasks as PENDING")
    def mark_pending(self, request, queryset):
        queryset.update(status=Task.Status.PENDING)


@admin.register(TaskAssignment)
class TaskAssignmentAdmin(admin.ModelAdmin):
    list_display = ("task", "volunteer", "assigned_at", "completed")
    list_filter = ("completed", "task__status")
    search_fields = ("task__title", "volunteer__full_name", "volunteer__email")
    autocomplete_fields = ("task", "volunteer")
